import asyncio
import logging
import sys
from typing import Any, Dict

from pydantic import ValidationError

from ..errors import StudyPathError
from .agent import AdvisoryAgent
from .flow import ai_enabled_from_env, run_advisory
from .schemas import Domain, REQUEST_MODELS

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def _ask_fields(domain: Domain) -> Dict[str, Any]:
    """Prompt for each request field; blank answers skip optional fields."""
    answers: Dict[str, Any] = {}
    for name, info in REQUEST_MODELS[domain].model_fields.items():
        label = info.alias or name
        suffix = "" if info.is_required() else " (optional)"
        raw = input(f"{label}{suffix}: ").strip()
        if not raw:
            continue
        if name == "preferred_universities":
            answers[name] = [u.strip() for u in raw.split(",") if u.strip()]
        else:
            answers[name] = raw
    return answers


def _ai_disabled(domain: Domain, request: Any) -> None:
    print("AI mode is disabled (set STUDYPATH_AI_ENABLED=1). The app shows placeholder content here.")
    return None


async def run_advisory_demo(domain: Domain):
    print(f"--- {domain.value.title()} advice ---")
    request = _ask_fields(domain)

    ai_enabled = ai_enabled_from_env()
    try:
        agent = AdvisoryAgent() if ai_enabled else None
        outcome = await run_advisory(domain, request, ai_enabled=ai_enabled, fallback=_ai_disabled, agent=agent)
    except StudyPathError as e:
        print(f"❌ Error [{e.code}]: {e.message}")
        return
    except ValidationError as e:
        print(f"❌ Invalid input: {e.errors()[0]['msg']}")
        return

    if outcome.result is not None:
        print("\n=== RESULT ===")
        print(outcome.result.model_dump_json(indent=2, by_alias=True))


if __name__ == "__main__":
    name = sys.argv[1] if len(sys.argv) > 1 else "profile"
    try:
        selected = Domain(name)
    except ValueError:
        print(f"Unknown domain {name!r}. Choose from: {', '.join(d.value for d in Domain)}")
        sys.exit(2)
    asyncio.run(run_advisory_demo(selected))
