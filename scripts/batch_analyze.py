#!/usr/bin/env python3
"""
Analyze every image in a folder and optionally render card art for each.

Usage:
    python scripts/batch_analyze.py tests/assets
    python scripts/batch_analyze.py tests/assets --output out/ --template assets/template.png

Needs GEMINI_API_KEY. Prints one JSON line per image; a failing image is
reported and the batch continues.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pareido.analyzer import analyze_image  # noqa: E402
from pareido.errors import PareidoError  # noqa: E402
from pareido.image_generator import generate_card_art  # noqa: E402
from pareido.prompts import ANALYSIS_PROMPT, build_card_prompt  # noqa: E402

IMAGE_SUFFIXES = {".jpeg", ".jpg", ".png", ".gif"}

logger = logging.getLogger("pareido.batch")


def find_images(folder: Path) -> list[Path]:
    return sorted(p for p in folder.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)


def process_image(image_path: Path, prompt: str, model=None, output_path=None,
                  template=None) -> dict:
    result = analyze_image(str(image_path), prompt=prompt, model=model)
    if output_path:
        generate_card_art(
            build_card_prompt(result),
            image=str(image_path),
            template_image=template,
            output_path=str(output_path),
        )
        result["card_path"] = str(output_path)
    return result


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Batch-analyze a folder of images into Symbiotes")
    parser.add_argument("folder", type=Path, help="Folder containing .jpg/.jpeg/.png/.gif images")
    parser.add_argument("--output", type=Path, default=None,
                        help="Write generated card art here (skipped if omitted)")
    parser.add_argument("--template", default=None, help="Card frame template image")
    parser.add_argument("--prompt-file", type=Path, default=None,
                        help="Use this analysis prompt instead of the built-in one")
    parser.add_argument("--model", default=None, help="Gemini model for analysis")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    prompt = args.prompt_file.read_text(encoding="utf-8") if args.prompt_file else ANALYSIS_PROMPT
    images = find_images(args.folder)
    logger.info("Found %d images to process", len(images))

    failures = 0
    for i, image_path in enumerate(images, start=1):
        logger.info("Processing image %d/%d: %s", i, len(images), image_path.name)
        output_path = args.output / f"generated_image_{i}.jpg" if args.output else None
        try:
            result = process_image(image_path, prompt, args.model, output_path, args.template)
        except PareidoError as e:
            failures += 1
            logger.error("Error processing %s: %s", image_path.name, e)
            continue
        print(json.dumps({"file": image_path.name, **result}))

    return 1 if failures and failures == len(images) else 0


if __name__ == "__main__":
    sys.exit(main())
