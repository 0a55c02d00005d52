"""Document processing pipeline.

upload -> parse -> analyze -> persist -> AI-enhance, driven by one
fire-and-forget asyncio task per document. Progress is written to the
document record as the run advances: 10 (started), 25 (parsed), 40 (page
saved), 60 (analyzed), 100 (completed), -1 (failed).
"""
import asyncio
import logging
import os
from datetime import datetime
from typing import Awaitable, Set, TypeVar

from docintake import config
from docintake.database import document_crud
from docintake.services import gemini, nlp, pdf

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Strong references to running tasks; the loop only keeps weak ones
_background_tasks: Set[asyncio.Task] = set()


class ProcessingTimeoutError(Exception):
    pass


class DocumentDeletedError(Exception):
    pass


async def with_timeout(awaitable: Awaitable[T], seconds: float, message: str) -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        raise ProcessingTimeoutError(message) from None


def _spawn(coro) -> asyncio.Task:
    task = asyncio.create_task(coro)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


async def _advance(document_id: str, updates: dict):
    if await document_crud.update_document(document_id, updates) is None:
        raise DocumentDeletedError(document_id)


async def _mark_error(document_id: str):
    await document_crud.update_document(document_id, {"status": "error", "processing_progress": -1})


async def _analyze(text: str):
    try:
        entities, keywords = await with_timeout(
            asyncio.gather(
                asyncio.to_thread(nlp.extract_entities, text),
                asyncio.to_thread(nlp.extract_keywords_from_text, text, config.MAX_KEYWORDS),
            ),
            config.NLP_TIMEOUT,
            "NLP processing timed out",
        )
    except Exception as e:
        logger.warning("NLP analysis skipped: %s", e)
        return [], []
    return entities, keywords


async def process_document(document_id: str, file_path: str) -> None:
    logger.info("Processing document %s from %s", document_id, file_path)
    try:
        await document_crud.delete_pages(document_id)
        await document_crud.delete_extractions(document_id)
        await _advance(document_id, {"status": "processing", "processing_progress": 10})

        timeout = config.PDF_PARSE_TIMEOUT
        parsed = await with_timeout(
            asyncio.to_thread(pdf.parse_pdf, file_path),
            timeout,
            f"PDF parsing timed out after {timeout:g} seconds",
        )
        text = parsed.text or ""
        page_count = parsed.page_count or 1
        await _advance(document_id, {"processing_progress": 25})

        process_text = text[:config.MAX_TEXT_LENGTH]

        _, stats = await asyncio.gather(
            document_crud.create_page({
                "document_id": document_id,
                "page_number": 1,
                "extracted_text": text,
                "ocr_confidence": 1.0,
            }),
            asyncio.to_thread(nlp.get_text_statistics, process_text),
        )
        await _advance(document_id, {"processing_progress": 40})

        entities, keywords = await _analyze(process_text)
        await _advance(document_id, {"processing_progress": 60})

        analysis = {
            "summary": nlp.build_summary(process_text),
            "keywords": keywords[:config.MAX_KEYWORDS],
            "entities": entities,
            "tables": [],
            "word_count": stats["word_count"],
            "character_count": stats["character_count"],
        }
        await document_crud.create_extraction({
            "document_id": document_id,
            "extraction_type": "analysis",
            "data": analysis,
        })

        await _advance(document_id, {
            "status": "completed",
            "processed_at": datetime.utcnow(),
            "page_count": page_count,
            "processing_progress": 100,
        })
        logger.info("Document %s completed (%d pages, %d words)", document_id, page_count, stats["word_count"])

    except DocumentDeletedError:
        # Deleted while running; drop whatever this run already wrote
        logger.info("Document %s was deleted during processing", document_id)
        await document_crud.delete_pages(document_id)
        await document_crud.delete_extractions(document_id)
        return
    except Exception:
        logger.exception("Error processing document %s", document_id)
        await _mark_error(document_id)
        raise

    if gemini.is_gemini_configured():
        _spawn(enhance_analysis_with_ai(document_id, text))


async def enhance_analysis_with_ai(document_id: str, text: str) -> None:
    """Replace the heuristic summary and merge AI keywords. Never raises."""
    try:
        text_for_ai = text[:config.MAX_AI_TEXT_LENGTH]
        timeout = config.AI_ENHANCE_TIMEOUT
        summary, ai_keywords = await with_timeout(
            asyncio.gather(
                gemini.generate_document_summary(text_for_ai),
                gemini.extract_keywords(text_for_ai),
            ),
            timeout,
            f"AI enhancement timed out after {timeout:g} seconds",
        )

        extraction = await document_crud.get_extraction(document_id, "analysis")
        if not extraction:
            logger.warning("No analysis to enhance for document %s", document_id)
            return

        analysis = extraction["data"]
        analysis["summary"] = summary
        merged = list(dict.fromkeys([*ai_keywords, *analysis.get("keywords", [])]))
        analysis["keywords"] = merged[:config.MAX_KEYWORDS]
        await document_crud.update_extraction(extraction["_id"], analysis)
        logger.info("AI enhancement applied to document %s", document_id)
    except Exception as e:
        logger.error("AI enhancement failed for document %s: %s", document_id, e)


async def _run_document_job(document_id: str, file_path: str):
    try:
        await process_document(document_id, file_path)
    except Exception as e:
        logger.error("Background processing failed for document %s: %s", document_id, e)
        try:
            await _mark_error(document_id)
        except Exception:
            logger.exception("Could not mark document %s as failed", document_id)


def schedule_processing(document_id: str, file_path: str) -> asyncio.Task:
    """Start processing without waiting for it; must be called on a running loop."""
    return _spawn(_run_document_job(document_id, file_path))


async def cancel_background_tasks(*extra: asyncio.Task) -> int:
    """
    Cancel running jobs and wait for them to unwind. Cancelled documents stay
    in ``processing`` and are picked up by the next startup sweep.
    """
    tasks = [t for t in (*_background_tasks, *extra) if t is not None and not t.done()]
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Cancelled %d background job(s)", len(tasks))
    return len(tasks)


async def recover_stuck_documents() -> int:
    """
    Restart every document left in ``processing`` by a previous run.

    Documents whose file is gone are marked as failed. Returns how many
    documents were found stuck.
    """
    try:
        logger.info("Checking for documents stuck in 'processing' state...")
        stuck = await document_crud.get_documents_by_status("processing")
        if not stuck:
            logger.info("No stuck documents found.")
            return 0

        logger.info("Found %d stuck document(s). Restarting processing...", len(stuck))
        jobs = []
        for doc in stuck:
            file_path = os.path.join(config.UPLOAD_DIR, doc["filename"])
            if os.path.exists(file_path):
                logger.info("Reprocessing %s (ID: %s)", doc.get("original_name"), doc["_id"])
                jobs.append(process_document(doc["_id"], file_path))
            else:
                logger.warning("File not found for document %s. Marking as error.", doc["_id"])
                jobs.append(_mark_error(doc["_id"]))

        results = await asyncio.gather(*jobs, return_exceptions=True)
        failures = [r for r in results if isinstance(r, Exception)]
        logger.info(
            "Finished reprocessing stuck documents (%d ok, %d failed).",
            len(results) - len(failures), len(failures),
        )
        return len(stuck)
    except Exception:
        logger.exception("Error during startup reprocessing of stuck documents")
        return 0
