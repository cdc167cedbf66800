"""
News RAG Main Entry Point

Interactive CLI over the same pipeline the API server uses.

Commands:
    /session <id>   answer inside a chat session (transcript is kept)
    /session        leave the session, back to one-off queries
    /history        show the current session transcript
    /clear          clear the current session transcript
    quit            exit
"""

import asyncio
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from newsrag.config import get_settings
from newsrag.errors import NewsRagError, UpstreamError
from newsrag.container import NewsRagContainer


# Set up logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def print_banner():
    """Print banner."""
    print("\n" + "=" * 60)
    print("  News RAG: ask questions about the news corpus")
    print("=" * 60 + "\n")


def print_sources(sources) -> None:
    for i, src in enumerate(sources, 1):
        title = src.payload.get("title") or src.payload.get("headline") or f"Article {i}"
        print(f"    {i}. {title} (score {src.score:.3f})")


async def run(container: NewsRagContainer) -> None:
    """Read-eval loop. Blocking input is moved off the event loop."""
    session_id: Optional[str] = None

    while True:
        prompt = f"💬 [{session_id}] You: " if session_id else "💬 You: "
        try:
            user_input = (await asyncio.to_thread(input, prompt)).strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\n👋 Goodbye!")
            break

        if not user_input:
            continue

        if user_input.lower() in ["quit", "exit", "q"]:
            print("\n👋 Goodbye!")
            break

        if user_input.startswith("/session"):
            parts = user_input.split(maxsplit=1)
            session_id = parts[1] if len(parts) > 1 else None
            print(f"    Session: {session_id or 'none'}\n")
            continue

        if user_input in ["/history", "/clear"]:
            if not session_id:
                print("    No active session. Use /session <id> first.\n")
                continue
            if user_input == "/clear":
                await container.sessions.clear_history(session_id)
                print("    Cleared.\n")
            else:
                for msg in await container.sessions.get_history(session_id):
                    print(f"    {msg.role}: {msg.content}")
                print()
            continue

        try:
            if session_id:
                result = await container.sessions.process_chat(session_id, user_input)
            else:
                result = await container.pipeline.run_query(user_input)
        except UpstreamError as e:
            print(f"\n❌ Upstream service failed: {e.message}\n")
            continue

        print(f"\n🤖 {result.answer}")
        if result.cached:
            print("    (from cache)")
        if result.sources:
            print("\n📰 Sources:")
            print_sources(result.sources)
        print("\n" + "-" * 60 + "\n")


async def amain() -> int:
    settings = get_settings()
    try:
        container = await NewsRagContainer.build(settings)
    except NewsRagError as e:
        print(f"❌ Initialization failed: {e.message}")
        return 1

    print_banner()
    if not container.cache.is_connected:
        print("⚠️  Redis not reachable: answers and sessions will not be cached.\n")

    try:
        await run(container)
    finally:
        await container.close()
    return 0


def main():
    """Main CLI application."""
    load_dotenv()
    sys.exit(asyncio.run(amain()))


if __name__ == "__main__":
    main()
