#!/usr/bin/env python3
"""Terminal chat against a running relay, through the streaming client.

    python backend/chat_cli.py "2+2?"
    python backend/chat_cli.py --base-url http://localhost:3000

With no message argument it reads prompts from stdin until EOF.
Ctrl-C stops the answer in progress and exits.
"""

import argparse
import asyncio
import sys

import httpx

from chatrelay.client import ChatSession, Conversation


def _printer():
    """on_update callback that echoes only the new part of the current answer."""
    shown = {"mid": None, "len": 0}

    def on_update(conversation: Conversation) -> None:
        entry = conversation.current
        if entry is None:
            return
        if entry.mid != shown["mid"]:
            shown["mid"], shown["len"] = entry.mid, 0
        print(entry.content[shown["len"]:], end="", flush=True)
        shown["len"] = len(entry.content)

    return on_update


async def check_health(http: httpx.AsyncClient) -> bool:
    resp = await http.get("/api/health")
    if resp.status_code != 200:
        print(f"❌ health check returned {resp.status_code}")
        return False
    data = resp.json()
    print(f"🏥 {data['status']} (upstream configured: {data['upstream_configured']})")
    return True


async def ask(session: ChatSession, message: str) -> None:
    task = session.send_message(message)
    if task is None:
        return
    try:
        await asyncio.shield(task)
    except asyncio.CancelledError:
        session.stop_conversation()
        print("\n⏹  stopped")
        raise
    answer = session.messages[-1]
    if answer.role == "assistant" and answer.html_str is None:
        # failures arrive as a whole entry rather than as chunks
        print(answer.content, end="")
    print()


async def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("message", nargs="?", help="Single message to send")
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--timeout", type=float, default=120.0)
    args = parser.parse_args()

    async with httpx.AsyncClient(base_url=args.base_url, timeout=args.timeout) as http:
        try:
            healthy = await check_health(http)
        except httpx.HTTPError as e:
            print(f"❌ relay not reachable at {args.base_url}: {e}")
            return 1
        if not healthy:
            return 1

        session = ChatSession(http, on_update=_printer())

        if args.message:
            await ask(session, args.message)
            return 0

        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                return 0
            await ask(session, line)


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)
