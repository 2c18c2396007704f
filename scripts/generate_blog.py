"""Generate a blog end to end against a running backend.

Usage:
    python scripts/generate_blog.py "AI in healthcare" -k AI -k healthcare \
        --save-audio --email me@example.com
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

sys.path.append(os.getcwd())

from app.client import AudioTimeoutError, ContentPoller, PollTimeoutError  # noqa: E402


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Submit a topic and wait for the blog and audio.")
    parser.add_argument("topic")
    parser.add_argument("-k", "--keyword", action="append", dest="keywords", required=True)
    parser.add_argument("--audience")
    parser.add_argument("--context")
    parser.add_argument("--tone", default="professional")
    parser.add_argument("--style", default="informative")
    parser.add_argument("--word-count", type=int, default=1500)
    parser.add_argument("--sections", type=int, default=5)
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--interval", type=float, default=5.0)
    parser.add_argument("--max-attempts", type=int, default=50)
    parser.add_argument("--save-audio", action="store_true", help="Write blog-audio-<id>.wav")
    parser.add_argument("--email", help="Send the finished article to this address")
    return parser.parse_args(argv)


def _print_summary(payload):
    article = payload["article"]
    print(f"\nTitle: {article['title']}")
    print(f"Words: {article.get('wordCount')}  Sections: {len(article.get('sections') or [])}")
    for section in article.get("sections") or []:
        print(f"  {section['order'] + 1}. {section['heading']}")
    audio = payload.get("audio")
    if audio:
        print(f"Audio: {audio['format']} {audio['sampleRate']} Hz, {audio['channels']} channel(s)")


async def main(argv=None):
    args = _parse_args(argv)
    body = {
        "topic": args.topic,
        "keywords": args.keywords,
        "targetAudience": args.audience,
        "additionalContext": args.context,
        "options": {
            "tone": args.tone,
            "style": args.style,
            "wordCount": args.word_count,
            "sectionCount": args.sections,
        },
    }
    body = {key: value for key, value in body.items() if value is not None}

    async with ContentPoller(
        args.base_url, interval=args.interval, max_attempts=args.max_attempts
    ) as poller:
        request_id = await poller.submit(body)
        print(f"Accepted request {request_id}")

        def _progress(attempt, total):
            print(f"\rPolling {attempt}/{total}...", end="", flush=True)

        has_audio = True
        try:
            payload = await poller.poll(request_id, on_progress=_progress)
        except AudioTimeoutError as exc:
            print("\nArticle ready, audio not available.")
            payload = exc.payload
            has_audio = False
        except PollTimeoutError as exc:
            print(f"\n{exc}")
            return 1

        _print_summary(payload)

        if args.save_audio and has_audio:
            path = Path(f"blog-audio-{request_id}.wav")
            path.write_bytes(await poller.fetch_audio(request_id))
            print(f"Saved audio to {path}")

        if args.email:
            result = await poller.send_email(request_id, args.email)
            print(result.get("message"))

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
