"""
Interactive text chat against the conversation engine.

    python tools/chat_repl.py --language es --fast --seed 7

Reads one line per turn; an empty line or EOF quits. Navigation targets are
printed as they are dispatched. JSON event logs are silenced unless --logs.
"""

from __future__ import annotations

import argparse
import asyncio
import random

from constants import DEFAULT_ASSISTANT_NAME, DEFAULT_REPLY_LANGUAGE
from conversation.controller import ConversationController
from conversation.messages import ChatMessage
from conversation.navigation import NavigationDispatcher
from intent.categories import NavigationTarget
from intent.classifier import IntentClassifier
from observability import logger
from replies.generator import ResponseGenerator


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the assistant from a terminal.")
    parser.add_argument("--language", default=DEFAULT_REPLY_LANGUAGE)
    parser.add_argument("--name", default=DEFAULT_ASSISTANT_NAME, help="assistant display name")
    parser.add_argument("--fast", action="store_true", help="skip the simulated reply delay")
    parser.add_argument("--seed", type=int, default=None, help="seed reply selection")
    parser.add_argument("--logs", action="store_true", help="print JSON event logs")
    return parser.parse_args()


def _show(message: ChatMessage) -> None:
    # user lines are already on screen from input()
    if message.sender == "assistant":
        print(f"bot> {message.text}")


def _navigate(target: NavigationTarget) -> None:
    print(f"   [navigate -> {target.value}]")


async def _run(args: argparse.Namespace) -> None:
    generator = ResponseGenerator(
        assistant_name=args.name,
        rng=random.Random(args.seed),
        simulate_latency=not args.fast,
    )
    controller = ConversationController(
        classifier=IntentClassifier(),
        generator=generator,
        dispatcher=NavigationDispatcher(_navigate),
        language=args.language,
    )
    controller.subscribe(on_message=_show)
    controller.open(capture_supported=False)

    loop = asyncio.get_running_loop()
    while True:
        try:
            line = await loop.run_in_executor(None, input, "you> ")
        except EOFError:
            break
        if not line.strip():
            break
        await controller.submit(line)
        # let scheduled navigation print before the next prompt
        await asyncio.sleep(0)

    print(f"({controller.turn_count} turns)")


def main() -> None:
    args = _parse_args()
    logger.configure(enabled=args.logs)
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
