"""Advisory pipeline: prompt builder, generative client, parser, agent."""

from .agent import AdvisoryAgent
from .flow import AdvisoryOutcome, run_advisory
from .parser import parse
from .prompts import build_prompt
from .schemas import Domain

__all__ = ["AdvisoryAgent", "AdvisoryOutcome", "Domain", "build_prompt", "parse", "run_advisory"]
