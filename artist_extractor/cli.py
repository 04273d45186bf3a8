"""CLI interface for artist document extraction"""
import click
import json
from pathlib import Path
from typing import Dict, List, Optional
from .config import SUPPORTED_FORMATS
from .enhancer import AIEnhancer
from .errors import ExtractionError
from .extractor import DocumentExtractor, create_extractor
import time
import traceback


def find_documents(folder: Path) -> List[Path]:
    """List supported documents in a folder, sorted by name"""
    return sorted(
        path for path in folder.iterdir()
        if path.is_file() and path.suffix.lower().lstrip('.') in SUPPORTED_FORMATS
    )


def process_document(extractor: DocumentExtractor,
                     doc_path: Path,
                     file_type: Optional[str] = None,
                     enhancer: Optional[AIEnhancer] = None,
                     output_dir: Path = None) -> Dict:
    """Process a single document"""
    file_type = file_type or doc_path.suffix.lstrip('.')
    try:
        click.echo(f"Processing: {doc_path.name} (type: {file_type})")

        start_ts = time.perf_counter()
        result = extractor.extract(doc_path, file_type)
        output = result.to_dict()
        if enhancer is not None:
            output["enhanced"] = enhancer.enhance_structured(result.fields, result.raw_text)
        elapsed_s = time.perf_counter() - start_ts

        # Save results if output directory specified
        if output_dir:
            output_path = output_dir / f"{doc_path.stem}_extraction.json"
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(output, f, indent=2, ensure_ascii=False)
            click.echo(f"  Results saved to: {output_path}")

        # Report timing, method and LLM usage
        metadata = result.metadata
        used_llm = output.get("enhanced", {}).get("_metadata", {}).get("llm_used", False)
        click.echo(
            f"  Time: {elapsed_s:.2f}s | Method: {metadata.method} | "
            f"Confidence: {metadata.confidence} | LLM used: {'yes' if used_llm else 'no'}"
        )

        return output

    except ExtractionError as e:
        click.echo(f"  Error processing {doc_path.name}: {e}", err=True)
        if click.get_current_context().params.get('verbose'):
            traceback.print_exc()
        return {}


@click.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option('--type', '-t', 'file_type',
              type=click.Choice(SUPPORTED_FORMATS, case_sensitive=False),
              help='File type (defaults to the file extension)')
@click.option('--output-dir', '-o',
              type=click.Path(file_okay=False, path_type=Path),
              help='Directory to save extraction results')
@click.option('--enhance', '-e', is_flag=True,
              help='Clean extracted fields with the LLM (deterministic without OPENAI_API_KEY)')
@click.option('--verbose', '-v', is_flag=True,
              help='Verbose output')
def main(path: Path, file_type: str, output_dir: Path, enhance: bool, verbose: bool):
    """
    Extract artist information from a document or a folder of documents.

    PATH: A PDF, DOC/DOCX or JPEG/PNG file, or a folder containing them

    Examples:

    \b
    # Single file, printed to stdout
    artist-extract profile.pdf

    \b
    # Whole folder with AI enhancement, saved as JSON
    artist-extract /path/to/documents --enhance --output-dir results
    """
    # Initialize extractor
    try:
        extractor = create_extractor()
        enhancer = AIEnhancer() if enhance else None
    except Exception as e:
        click.echo(f"Error initializing extractor: {e}", err=True)
        if verbose:
            traceback.print_exc()
        return

    # Create output directory if specified
    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    if path.is_file():
        output = process_document(extractor, path, file_type, enhancer, output_dir)
        if output and not output_dir:
            click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return

    # Get documents
    documents = find_documents(path)
    if not documents:
        click.echo(f"No supported documents found in {path}", err=True)
        return

    click.echo(f"Found {len(documents)} document(s)")

    # Process each document
    all_results = {}
    for doc_path in documents:
        output = process_document(extractor, doc_path, None, enhancer, output_dir)
        if not output:
            continue
        all_results[doc_path.name] = output

        if verbose:
            click.echo("  Extracted fields:")
            for field, value in output["fields"].items():
                click.echo(f"    {field}: {value}")

    # Summary
    click.echo(f"\nProcessed {len(all_results)} of {len(documents)} document(s) successfully")

    # Save combined results if output directory specified
    if output_dir and all_results:
        combined_path = output_dir / "all_extractions.json"
        with open(combined_path, 'w', encoding='utf-8') as f:
            json.dump(all_results, f, indent=2, ensure_ascii=False)
        click.echo(f"Combined results saved to: {combined_path}")


if __name__ == '__main__':
    main()
