import asyncio
import logging
import sys

from ..advisory.client import get_generative_client
from .agent import ChatSessionManager, new_session
from .client import GenerativeChatResponder, RelayChatClient

logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


async def run_chat_session(mode: str):
    # "relay" talks to the server-side chat handler, "direct" to the model.
    if mode == "direct":
        responder = GenerativeChatResponder(get_generative_client())
    else:
        responder = RelayChatClient()

    manager = ChatSessionManager(responder)
    session = new_session()
    print(f"\nEduBot: {session.transcript[-1].content}\n")
    print("Type 'exit' or 'quit' to stop.\n")

    loop = asyncio.get_running_loop()
    while True:
        try:
            user_input = (await loop.run_in_executor(None, input, "You: ")).strip()
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break
        if user_input.lower() in ["exit", "quit"]:
            print("Goodbye!")
            break
        if not user_input:
            continue

        print("EduBot: Thinking...")
        await manager.send(session, user_input)
        print(f"\nEduBot:\n{session.transcript[-1].content}\n")


if __name__ == "__main__":
    run_mode = sys.argv[1] if len(sys.argv) > 1 else "relay"
    asyncio.run(run_chat_session(run_mode))
