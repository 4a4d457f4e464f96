"""CLI command for track-change extraction from .docx files."""

from __future__ import annotations

import argparse
import asyncio
from datetime import datetime, timezone
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from redline.cli.config import ExtractSettings
from redline.extraction.parser import DocumentParseError, DocxRedlineParser

logger = logging.getLogger(__name__)

_SUPPORTED_SUFFIXES = {".docx"}


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(
            path
            for path in target.rglob("*")
            if path.is_file() and path.suffix.lower() in _SUPPORTED_SUFFIXES and not path.name.startswith("~$")
        )
    return []


async def _parse_file(
    parser: DocxRedlineParser,
    path: Path,
    *,
    semaphore: asyncio.Semaphore,
    timeout: float | None,
    include_content: bool,
) -> tuple[dict[str, object] | None, dict[str, str] | None]:
    async with semaphore:
        try:
            data = await asyncio.to_thread(path.read_bytes)
            last_modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        except OSError as exc:
            return None, {"source_path": str(path), "error": f"Failed to read source file: {exc}"}

        try:
            parsed = await asyncio.wait_for(
                parser.parse(data, filename=path.name, last_modified=last_modified),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.error("Timed out after %ss parsing %s", timeout, path)
            return None, {"source_path": str(path), "error": f"Timed out after {timeout}s"}
        except DocumentParseError as exc:
            return None, {"source_path": str(path), "error": str(exc)}

    result: dict[str, object] = {
        "source_path": str(path),
        "extraction_path": parsed.extraction_path.value,
        "metadata": parsed.metadata.to_dict(),
        "changes": [change.to_dict() for change in parsed.changes],
    }
    if include_content:
        result["content"] = parsed.content
    return result, None


async def run_extraction(
    files: list[Path],
    *,
    parser: DocxRedlineParser,
    timeout: float | None,
    max_concurrency: int,
    include_content: bool = False,
) -> tuple[list[dict[str, object]], list[dict[str, str]]]:
    """Parse every file independently and split outcomes into results and errors."""

    semaphore = asyncio.Semaphore(max_concurrency)
    outcomes = await asyncio.gather(
        *(
            _parse_file(parser, path, semaphore=semaphore, timeout=timeout, include_content=include_content)
            for path in files
        )
    )

    results = [result for result, _error in outcomes if result is not None]
    errors = [error for _result, error in outcomes if error is not None]
    return results, errors


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Extract track changes and comments from .docx files")
    parser.add_argument("--path", required=True, help="Source .docx file or directory")
    parser.add_argument("--timeout", type=float, default=None, help="Per-document timeout in seconds")
    parser.add_argument("--max-concurrency", type=int, default=None, help="Documents parsed at the same time")
    parser.add_argument("--include-content", action="store_true", help="Include extracted plain text in output")
    args = parser.parse_args(argv)

    try:
        settings = ExtractSettings.from_env()
    except ValueError as error:
        logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        logger.error("Configuration error: %s", error)
        return 1

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.logging_level,
    )

    timeout = args.timeout if args.timeout is not None else settings.timeout
    max_concurrency = max(1, args.max_concurrency or settings.max_concurrency)

    source_path = Path(args.path)
    files = _collect_inputs(source_path)
    if not files:
        logger.warning("No .docx files found at %s", source_path)

    results, errors = asyncio.run(
        run_extraction(
            files,
            parser=DocxRedlineParser(),
            timeout=timeout or None,
            max_concurrency=max_concurrency,
            include_content=args.include_content,
        )
    )

    payload = {
        "path": str(source_path),
        "processed": len(results),
        "results": results,
        "errors": errors,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if not errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
