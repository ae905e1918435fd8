"""Typed, rate-limit compliant client for the NationStates API.
See https://www.nationstates.net/pages/api.html for NS API details.
"""

from nsclient.core import *
from nsclient.exceptions import *
from nsclient.ratelimit import *
from nsclient.gate import *
from nsclient.shards import *
from nsclient.parser import *
from nsclient.models import *
from nsclient.api import *
