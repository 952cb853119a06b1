import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from slidegraph.application.session import PluginSession
from slidegraph.config.import_config import ImportConfig
from slidegraph.config.logging_config import apply_logging_config
from slidegraph.services.memory_host import DEFAULT_AVAILABLE_FONTS, InMemorySceneHost


def parse_font(value: str):
    """``"Family:Style"``, style defaulting to Regular."""
    family, _, style = value.partition(":")
    return family.strip(), (style.strip() or "Regular")


def print_event(message: Dict[str, Any]) -> None:
    if message["type"] == "progress":
        print(f"[{message['percent']:5.1f}%] {message['text']}")
    elif message["type"] == "complete":
        print(f"Imported {message['slideCount']} slide(s)")
    elif message["type"] == "cancelled":
        print(f"Cancelled after {message['slideCount']} slide(s)")
    else:
        print(f"Error: {message.get('message')}")


async def run(
    presentation: Dict[str, Any],
    image_data: Dict[str, Any],
    config: ImportConfig,
    fonts: Optional[List] = None
) -> InMemorySceneHost:
    host = InMemorySceneHost(available_fonts=fonts)

    session = PluginSession(host, print_event, config=config)
    await session.handle_message({
        "type": "import-slides",
        "presentation": presentation,
        "imageData": image_data,
    })
    return host


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Import a presentation JSON into an in-memory scene")
    parser.add_argument("presentation_json", help="Path to the fetched presentation JSON")
    parser.add_argument("--images", help="Path to a JSON map of image key -> data URI")
    parser.add_argument("--out", default="./scene.json", help="Output scene JSON")
    parser.add_argument(
        "--font", action="append", default=None, metavar="FAMILY[:STYLE]",
        help="Font available on the host (repeatable); defaults to a common set"
    )
    parser.add_argument("--no-fit", action="store_true", help="Keep the original page size")
    args = parser.parse_args()

    config = ImportConfig()
    if args.no_fit:
        config.canvas.fit_to_canvas = False
    config.validate()
    apply_logging_config(level=config.log_level)

    presentation = json.loads(Path(args.presentation_json).read_text())
    image_data = json.loads(Path(args.images).read_text()) if args.images else {}
    fonts = [parse_font(font) for font in args.font] if args.font else list(DEFAULT_AVAILABLE_FONTS)

    host = asyncio.run(run(presentation, image_data, config, fonts))

    out_path = Path(args.out).resolve()
    out_path.write_text(json.dumps(host.to_dict(), indent=2))
    print(f"Wrote {out_path}")


if __name__ == "__main__":
    main()
