from __future__ import annotations

import logging

from ..models.transcribe import AnalysisResult, TranscribeResponse
from .normalizer import ParseError, extract_analysis
from .providers import SpeechToText, TextGenerator

logger = logging.getLogger("app.analysis")

FALLBACK_SUMMARY = "Parsing did not work"
FALLBACK_FOLLOW_UP_ITEMS = ("Review transcript manually", "Follow up with client")

ANALYSIS_PROMPT = """
You are an AI assistant helping a broker analyze a conversation transcript. Please provide:

1. A concise summary of the conversation (2-3 sentences)
2. A list of specific follow-up items or action items that the broker should address

Here is the transcript:
{transcript}

Always format your response as JSON with the following structure:
{{
  "summary": "Your summary here",
  "followUpItems": ["Item 1", "Item 2", "Item 3"]
}}
"""


def build_analysis_prompt(transcript: str) -> str:
    return ANALYSIS_PROMPT.format(transcript=transcript)


def fallback_analysis() -> AnalysisResult:
    return AnalysisResult(summary=FALLBACK_SUMMARY, follow_up_items=list(FALLBACK_FOLLOW_UP_ITEMS))


def analyze_transcript(generator: TextGenerator, transcript: str, temperature: float = 0.1) -> AnalysisResult:
    """Summarize a transcript; unparseable model output yields the fallback values."""
    raw = generator.generate(build_analysis_prompt(transcript), temperature)
    try:
        return extract_analysis(raw)
    except ParseError as e:
        logger.warning("analysis output not parseable (%d chars): %s", len(raw or ""), e)
        return fallback_analysis()


def process_audio(
    speech: SpeechToText,
    generator: TextGenerator,
    audio: bytes,
    filename: str,
    temperature: float = 0.1,
) -> TranscribeResponse:
    """Transcribe then analyze. Provider errors propagate to the caller."""
    transcript = speech.transcribe(audio, filename)
    logger.info("transcribed %s: %d bytes -> %d chars", filename, len(audio), len(transcript))
    analysis = analyze_transcript(generator, transcript, temperature=temperature)
    return TranscribeResponse(
        transcript=transcript,
        summary=analysis.summary,
        follow_up_items=analysis.follow_up_items,
    )
