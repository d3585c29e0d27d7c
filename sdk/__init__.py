from .config import Config, SDKError
from .update import Update, SignedUpdate, DoubleUpdate, home_domain_hash
from .agent import AgentCore, OpticsAgent, AgentError, DoubleUpdateError

__all__ = ["Config", "SDKError", "Update", "SignedUpdate", "DoubleUpdate",
           "home_domain_hash", "AgentCore", "OpticsAgent", "AgentError",
           "DoubleUpdateError"]
