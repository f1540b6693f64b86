"""
Generic entrypoint.

Usage:
    python -m cfchat "your message"
    python -m cfchat --endpoint run --model @cf/meta/llama-3.1-8b-instruct "hi"
"""
from cfchat.cli import run

if __name__ == "__main__":
    run()
