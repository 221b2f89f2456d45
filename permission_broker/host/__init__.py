"""Host capability API adapters.

- HostPermissions: The request/query interface the registry consumes
- PolicyHost: Answers from configured allow-lists, optionally asking the operator
- RemoteHost: Delegates to a remote approval service over HTTP
- create_host: Picks one of the above from Settings
"""

from .base import GrantState, HostPermissions
from .factory import create_host
from .policy import PolicyHost, scope_matches
from .prompt import Prompter, console_prompt
from .remote import RemoteHost

__all__ = [
    "GrantState",
    "HostPermissions",
    "PolicyHost",
    "Prompter",
    "RemoteHost",
    "console_prompt",
    "create_host",
    "scope_matches",
]
