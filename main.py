#!/usr/bin/env python3
"""
ONNX Vectorizer - Diagnostic Entry Point

Inspects an ONNX embedding model or embeds a token id sequence with it, to
check how the engine binds inputs and resolves outputs for a given export.

Usage:
    # Show declared inputs/outputs and the detected embedding dimension
    python main.py inspect --model models/bert_Opset18.onnx

    # Embed token ids (already tokenized) and print the vector as JSON
    python main.py embed --model models/bert_Opset18.onnx --ids 101 2003 102
"""
import argparse
import sys
import json
import logging
from typing import List, Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_inspect(model_path: Optional[str], verbose: bool = False) -> dict:
    """Load the model and print what the vectorizer sees."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    from onnx_vectorizer import create_vectorizer

    overrides = {'model_path': model_path} if model_path else {}
    with create_vectorizer(**overrides) as vectorizer:
        info = vectorizer.get_model_info()

    print(json.dumps(info, indent=2))
    return info


def run_embed(
    model_path: Optional[str],
    token_ids: List[int],
    normalize: bool = False,
    pad_token_id: Optional[int] = None,
    verbose: bool = False
) -> List[float]:
    """
    Embed one token id sequence and print the result.

    Args:
        model_path: ONNX model file (defaults to VECTORIZER_MODEL_PATH)
        token_ids: Token ids produced by the model's tokenizer
        normalize: L2 normalize the embedding
        pad_token_id: Override the padding id
        verbose: Enable verbose logging
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    from onnx_vectorizer import create_vectorizer

    overrides = {'normalize': normalize, 'log_level': 'verbose' if verbose else 'standard'}
    if model_path:
        overrides['model_path'] = model_path
    if pad_token_id is not None:
        overrides['pad_token_id'] = pad_token_id

    with create_vectorizer(**overrides) as vectorizer:
        embedding = vectorizer.embed_sync(token_ids).tolist()
        logger.info(f"Embedding dimension: {len(embedding)}")
        if verbose:
            print(vectorizer.log.get_summary())

    print(json.dumps(embedding))
    return embedding


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="ONNX Vectorizer diagnostics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Inspect the default model
    python main.py inspect

    # Embed a tokenized sentence
    python main.py embed --model model.onnx --ids 101 7592 2088 102

    # Normalized embedding with a custom pad id
    python main.py embed --ids 0 31414 232 2 --pad-id 1 --normalize
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Inspect command
    inspect_parser = subparsers.add_parser('inspect', help='Show model inputs and outputs')
    inspect_parser.add_argument(
        '--model', '-m',
        help='Path to the ONNX model (default: VECTORIZER_MODEL_PATH)'
    )
    inspect_parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    # Embed command
    embed_parser = subparsers.add_parser('embed', help='Embed a token id sequence')
    embed_parser.add_argument(
        '--model', '-m',
        help='Path to the ONNX model (default: VECTORIZER_MODEL_PATH)'
    )
    embed_parser.add_argument(
        '--ids', '-i',
        type=int,
        nargs='*',
        default=[],
        help='Token ids to embed'
    )
    embed_parser.add_argument(
        '--pad-id',
        type=int,
        help='Token id treated as padding (default: VECTORIZER_PAD_TOKEN_ID)'
    )
    embed_parser.add_argument(
        '--normalize', '-n',
        action='store_true',
        help='L2 normalize the embedding'
    )
    embed_parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args()

    from onnx_vectorizer import VectorizerError

    try:
        if args.command == 'inspect':
            run_inspect(model_path=args.model, verbose=args.verbose)
        elif args.command == 'embed':
            run_embed(
                model_path=args.model,
                token_ids=args.ids,
                normalize=args.normalize,
                pad_token_id=args.pad_id,
                verbose=args.verbose
            )
        else:
            parser.print_help()
            sys.exit(1)
    except VectorizerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
