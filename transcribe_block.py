#!/usr/bin/env python3
"""
SiYuan Transcribe - command line entry point

Transcribes the audio in one SiYuan block with an OpenAI-compatible
speech-to-text API and inserts the text right after the block.

Usage:
    python3 transcribe_block.py 20240101120000-abcdefg [--language en] [--debug]

Requirements:
    - A running SiYuan kernel (default http://127.0.0.1:6806)
    - Python 3.9+
    - requests, pyperclip
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from siyuan_transcribe import __version__
from siyuan_transcribe.core.config import CONFIG_DIR, load_config, normalize_config, save_config
from siyuan_transcribe.core.element import AudioBlockElement
from siyuan_transcribe.core.errors import HostApiError
from siyuan_transcribe.core.state import SUCCESS_STATES
from siyuan_transcribe.core.transcription import TranscriptionEngine
from siyuan_transcribe.core.workflow import TranscribeBlockWorkflow
from siyuan_transcribe.platform.clipboard import PyperclipOutput
from siyuan_transcribe.platform.siyuan.kernel import SiYuanKernelClient, is_block_id
from siyuan_transcribe.stt.openai_backend import OpenAITranscriptionBackend

LOG = logging.getLogger("siyuan_transcribe")

# Flag name -> config key
OVERRIDES = {
    "api_key": "openai_api_key",
    "base_url": "base_url",
    "model": "model",
    "language": "language",
    "siyuan_url": "siyuan_url",
    "token": "siyuan_token",
}


def setup_logging(debug):
    """Debug log file when requested, otherwise warnings on stderr."""
    if debug:
        log_path = Path(CONFIG_DIR) / "debug.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            filename=str(log_path),
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="siyuan-transcribe",
        description="Transcribe the audio block BLOCK_ID and insert the text after it.",
    )
    parser.add_argument("block_id", help="id of the SiYuan audio block")
    parser.add_argument("--api-key", help="OpenAI API key (default: config or $OPENAI_API_KEY)")
    parser.add_argument("--base-url", help="transcription service root, /v1 is appended when missing")
    parser.add_argument("--model", help="transcription model (default: whisper-1)")
    parser.add_argument("--language", help="language code or name, e.g. en or English")
    parser.add_argument("--siyuan-url", help="SiYuan kernel address")
    parser.add_argument("--token", help="SiYuan API token")
    parser.add_argument("--save", action="store_true", help="persist the given options to the config file")
    parser.add_argument("--debug", action="store_true", help="write a debug log next to the config file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(config, args):
    """Return a normalized copy of *config* with command line values applied."""
    updated = dict(config)
    for flag, key in OVERRIDES.items():
        value = getattr(args, flag, None)
        if value is not None:
            updated[key] = value
    return normalize_config(updated)


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.debug or os.environ.get("SIYUAN_TRANSCRIBE_DEBUG") == "1")

    if not is_block_id(args.block_id):
        print(f"Not a SiYuan block id: {args.block_id}", file=sys.stderr)
        return 2

    config = apply_overrides(load_config(), args)
    if args.save:
        save_config(config)

    kernel = SiYuanKernelClient.from_config(config)
    try:
        dom = kernel.get_block_dom(args.block_id)
    except HostApiError as exc:
        LOG.error(f"Failed to read block {args.block_id}: {exc}")
        print(f"Failed to read block {args.block_id}: {exc}", file=sys.stderr)
        return 1

    engine = TranscriptionEngine(kernel, OpenAITranscriptionBackend(timeout=config["request_timeout"]))
    workflow = TranscribeBlockWorkflow(
        config,
        block_store=kernel,
        file_store=kernel,
        notifier=kernel,
        clipboard=PyperclipOutput(),
        engine=engine,
    )
    result = workflow.run([AudioBlockElement.from_html(dom)])

    if result.text is not None:
        print(result.text)
    else:
        print(result.message, file=sys.stderr)
    return 0 if result.state in SUCCESS_STATES else 1


if __name__ == "__main__":
    sys.exit(main())
