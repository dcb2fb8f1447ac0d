from __future__ import annotations

import argparse
import logging
import os
import shutil
from pathlib import Path

from render_backends import BackendConfig, BackendName, parse_backend_names

from .artifacts import write_composite_ledger_json
from .contracts import CompositeConfig
from .doc_module import run_composite_on_corpus, run_composite_on_pdf_file


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="render-diff",
        description=(
            "Render PDFs with several backends and write one side-by-side composite PNG per page."
        ),
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--corpus-root", type=Path, help="Directory searched recursively for *.pdf.")
    src.add_argument("--pdf", type=Path, help="Single PDF file.")
    p.add_argument("--out-root", required=True, type=Path, help="Explicit output root directory.")
    p.add_argument(
        "--backends",
        default=BackendName.PYPDFIUM2.value,
        help=(
            "Comma separated backends, left to right "
            f"({', '.join(n.value for n in BackendName)}). Default: pypdfium2."
        ),
    )
    p.add_argument("--scale", type=float, default=1.75, help="Scale applied to 72 dpi.")
    p.add_argument(
        "--border-fraction",
        type=float,
        default=0.02,
        help="Border width as a fraction of the shorter page side; 0 disables borders.",
    )
    p.add_argument("--backend-workers", type=int, default=None, help="Parallel backends per document.")
    p.add_argument("--document-workers", type=int, default=None, help="Parallel documents.")
    p.add_argument("--clean", action="store_true", help="Remove --out-root before writing.")
    p.add_argument("--out-ledger", type=Path, default=None, help="Optional JSON ledger of the run.")
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    p = build_arg_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        backends = parse_backend_names(args.backends)
        config = CompositeConfig(
            out_root=args.out_root,
            backends=backends,
            scale=args.scale,
            border_fraction=args.border_fraction or None,
            backend_workers=args.backend_workers,
            document_workers=args.document_workers,
        )
    except ValueError as e:
        p.error(str(e))

    # The only place environment variables are read.
    backend_config = BackendConfig.from_environ(os.environ)

    if args.clean and config.out_root.exists():
        shutil.rmtree(config.out_root)

    if args.pdf is not None:
        # Single files keep their parent directory's name in the output tree.
        parent_name = args.pdf.resolve().parent.name
        result = run_composite_on_pdf_file(
            config=config,
            pdf_file=args.pdf,
            source_pdf_relpath=f"{parent_name}/{args.pdf.name}" if parent_name else args.pdf.name,
            backend_config=backend_config,
        )
        pages = len(result.pages)
    else:
        result = run_composite_on_corpus(
            config=config, corpus_root=args.corpus_root, backend_config=backend_config
        )
        pages = sum(len(d.pages) for d in result.documents)

    if args.out_ledger is not None:
        write_composite_ledger_json(result=result, out_ledger=args.out_ledger)

    print(f"composites={pages} ok={result.ok}")
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
