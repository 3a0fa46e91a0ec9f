#!/usr/bin/env python3
"""
CLI for OXT Searchable Symmetric Encryption.

Commands:
  build <dir>          Build an encrypted index from .txt/.md/.csv/.pdf files in a directory
  search <kw> [<kw>]   Conjunctive keyword search (first keyword is the pivot)
  substring <pattern>  Substring search (index must be built with --substring)
  demo                 Run demo with built-in sample documents
  benchmark            Time setup and searches on synthetic documents
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .benchmark import run_benchmark
from .client import BooleanQueryScheme, Document, SubstringQueryScheme, load_documents
from .crypto import KeyCollection
from .errors import SSEError
from .server import EncryptedIndex, IndexBackend, JsonIndexBackend, SqliteIndexBackend

logger = logging.getLogger(__name__)

CLIENT_STATE_FILE = "client_state.json"

SAMPLE_DOCUMENTS = [
    Document("doc1", "The quick brown fox jumps over the lazy dog"),
    Document("doc2", "SSE is a technique for searching encrypted data"),
    Document("doc3", "Boolean queries allow searching for multiple keywords"),
    Document("doc4", "Substring search is more complex than keyword search"),
    Document("doc5", "Cryptography is essential for security"),
    Document("doc6", "Alice and Bob are common characters in crypto examples"),
    Document("doc7", "Hello world this is a test"),
    Document("doc8", "Searchable Symmetric Encryption is cool"),
]


def _fail(*message: Any) -> None:
    print(*message, file=sys.stderr)
    sys.exit(1)


def _backend(state_dir: Path, use_sqlite: bool) -> IndexBackend:
    if use_sqlite:
        return SqliteIndexBackend(state_dir / "index.db")
    return JsonIndexBackend(state_dir / "index.json")


def save_client_state(state_dir: Path, state: Dict[str, Any]) -> None:
    state_dir.mkdir(parents=True, exist_ok=True)
    (state_dir / CLIENT_STATE_FILE).write_text(json.dumps(state, indent=2), encoding="utf-8")


def load_client_state(state_dir: Path) -> Dict[str, Any]:
    path = state_dir / CLIENT_STATE_FILE
    if not path.exists():
        _fail("No index found in", state_dir, "- run: oxt-sse build <dir>")
    return json.loads(path.read_text(encoding="utf-8"))


def _load_index(state_dir: Path, state: Dict[str, Any]) -> EncryptedIndex:
    backend = _backend(state_dir, state.get("backend") == "sqlite")
    try:
        return backend.load()
    finally:
        backend.close()


def cmd_build(args: argparse.Namespace) -> None:
    try:
        documents = load_documents(Path(args.directory))
    except NotADirectoryError:
        _fail("Not a directory:", args.directory)
    except ValueError as e:
        _fail("Could not load documents:", e)
    if not documents:
        _fail("No indexable files in", args.directory)

    state: Dict[str, Any] = {"backend": "sqlite" if args.sqlite else "json"}
    if args.substring:
        scheme = SubstringQueryScheme()
        keys, index = scheme.setup_with_keys(documents)
        state.update(
            scheme="substring",
            q_min=scheme.q_min,
            q_max=scheme.q_max,
            boundary_char=scheme.boundary_char,
            token_counts=scheme.token_counts,
        )
    else:
        scheme = BooleanQueryScheme()
        index = scheme.setup(documents)
        keys = scheme.keys
        state["scheme"] = "boolean"
    state["keys"] = keys.to_dict()

    state_dir = Path(args.state)
    backend = _backend(state_dir, args.sqlite)
    try:
        backend.save(index)
    finally:
        backend.close()
    save_client_state(state_dir, state)
    print("Indexed", len(documents), "document(s):", [d.doc_id for d in documents])
    print("Keys and index saved to", state_dir)


def cmd_search(args: argparse.Namespace) -> None:
    state_dir = Path(args.state)
    state = load_client_state(state_dir)
    if state.get("scheme") != "boolean":
        _fail("Index was built for substring search; use the 'substring' command")
    keywords = [k.strip().lower() for k in args.keywords if k.strip()]
    if not keywords:
        _fail("No keywords given")
    scheme = BooleanQueryScheme(keys=KeyCollection.from_dict(state["keys"]))
    doc_ids = scheme.search(_load_index(state_dir, state), keywords)
    _print_matches(" AND ".join(keywords), doc_ids)


def cmd_substring(args: argparse.Namespace) -> None:
    state_dir = Path(args.state)
    state = load_client_state(state_dir)
    if state.get("scheme") != "substring":
        _fail("Index was not built with --substring")
    scheme = SubstringQueryScheme(
        q_min=state["q_min"],
        q_max=state["q_max"],
        boundary_char=state["boundary_char"],
        keys=KeyCollection.from_dict(state["keys"]),
        token_counts=state.get("token_counts"),
    )
    if len(args.pattern) < scheme.q_min:
        print(f"Pattern shorter than q_min={scheme.q_min}; no matches possible.", file=sys.stderr)
    doc_ids = scheme.search(_load_index(state_dir, state), args.pattern)
    _print_matches(args.pattern, doc_ids)


def _print_matches(query: str, doc_ids: List[str]) -> None:
    print("Query:", query)
    print("Matches:", len(doc_ids))
    for doc_id in sorted(doc_ids):
        print(" -", doc_id)


def cmd_demo(_: argparse.Namespace) -> None:
    """Self-contained demo with sample documents (no state directory used)."""
    boolean = BooleanQueryScheme()
    index = boolean.setup(SAMPLE_DOCUMENTS)
    print("Demo: indexed", len(SAMPLE_DOCUMENTS), "sample documents.")
    for keywords in (["search"], ["encrypted", "data"], ["searching", "keywords", "boolean"]):
        print(f"\nConjunctive search {keywords}:", sorted(boolean.search(index, keywords)))

    substring = SubstringQueryScheme()
    sub_index = substring.setup(SAMPLE_DOCUMENTS)
    for pattern in ("crypt", "search", "ick"):
        print(f"\nSubstring search {pattern!r}:", sorted(substring.search(sub_index, pattern)))
    print("\nDemo done.")


def cmd_benchmark(args: argparse.Namespace) -> None:
    out = run_benchmark(
        counts=tuple(args.counts),
        use_sqlite=args.sqlite,
        csv_path=Path(args.csv) if args.csv else None,
    )
    print(json.dumps(out, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Searchable Symmetric Encryption (OXT)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="Build an encrypted index from a directory")
    p_build.add_argument("directory", help="Directory containing documents")
    p_build.add_argument("--state", default=str(config.STATE_DIR), help="Where keys and index are written")
    p_build.add_argument("--substring", action="store_true", help="Build a substring (q-gram) index")
    p_build.add_argument("--sqlite", action="store_true", help="Persist the index in SQLite instead of JSON")

    p_search = sub.add_parser("search", help="Conjunctive keyword search")
    p_search.add_argument("keywords", nargs="+", help="Keywords; put the rarest first")
    p_search.add_argument("--state", default=str(config.STATE_DIR))

    p_substring = sub.add_parser("substring", help="Substring search")
    p_substring.add_argument("pattern", help="Substring pattern")
    p_substring.add_argument("--state", default=str(config.STATE_DIR))

    sub.add_parser("demo", help="Run demo with sample documents")

    p_bench = sub.add_parser("benchmark", help="Benchmark setup and search")
    p_bench.add_argument("--counts", type=int, nargs="+", default=[10, 100])
    p_bench.add_argument("--sqlite", action="store_true")
    p_bench.add_argument("--csv", help="Write per-run rows to this CSV file")
    return parser


COMMANDS = {
    "build": cmd_build,
    "search": cmd_search,
    "substring": cmd_substring,
    "demo": cmd_demo,
    "benchmark": cmd_benchmark,
}


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s: %(message)s",
    )
    try:
        COMMANDS[args.command](args)
    except SSEError as e:
        logger.debug("Command failed", exc_info=True)
        _fail("Error:", e)


if __name__ == "__main__":
    main()
