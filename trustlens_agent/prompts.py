"""
Prompt text for the forensic reasoning engine.

The wording here is content; only the JSON shape requested at the end is
relied on by the rest of the pipeline, and that shape is rendered from
RESPONSE_KEYS / BREAKDOWN_KEYS so the normalizer and the prompt agree.
"""
from __future__ import annotations

import json

from .models import AnalysisRequest

BREAKDOWN_KEYS = ("reviews", "sentiment", "price", "seller", "description")
RESPONSE_KEYS = ("trust_score", "verdict", "nlp_insights", "breakdown", "reasons", "advice")

_BREAKDOWN_HINTS = {
    "reviews": "Detailed review patterns found",
    "sentiment": "Sentiment vs Rating analysis",
    "price": "Price deviation analysis",
    "seller": "Seller trust history/domain age",
    "description": "Forensic text evaluation",
}

# Placeholders shown to the engine; the enum and number hints are not JSON values.
_FIELD_HINTS = {
    "trust_score": "<0-100 number>",
    "verdict": '"Genuine" | "Suspicious" | "Fake"',
    "nlp_insights": json.dumps(["Linguistic marker 1", "Linguistic marker 2"]),
    "reasons": json.dumps(["Key finding 1", "Key finding 2", "Key finding 3"]),
    "advice": json.dumps("Specific buyer warning or recommendation"),
}

SYSTEM_INSTRUCTION = """You are TrustLens Forensic AI, an elite specialist in e-commerce fraud detection.
Your methodology is based on linguistic footprinting, market pricing forensics, and seller reputation grounding.

Linguistic Footprinting Rules:
- Identify generic sentiment: bot reviews often use high-emotion, low-detail phrases (e.g., "Life changing", "Best ever").
- Check for "Review Hijacking": does the review text match the product category?
- Syntax patterns: detect excessive punctuation or repetitive sentence structures.

Seller & Domain Forensics:
- Grounding: use search to check domain registration period and "scam" keyword association.
- Price Anomalies: cross-reference market averages. If it's >50% lower than standard MSRP, flag as a bait scam.

RULES:
- Always return VALID JSON only. No markdown, no explanations outside JSON.
- trust_score must be between 0 and 100.
- verdict must be exactly one of: "Genuine", "Suspicious", "Fake".
- reasons must be short bullet style strings.
- advice must be clear and actionable."""


def response_shape() -> str:
    """Render the JSON object the engine is asked to return."""
    lines: list[str] = []
    for key in RESPONSE_KEYS:
        if key == "breakdown":
            inner = ",\n".join(f'    "{k}": {json.dumps([_BREAKDOWN_HINTS[k]])}' for k in BREAKDOWN_KEYS)
            lines.append(f'  "breakdown": {{\n{inner}\n  }}')
        else:
            lines.append(f'  "{key}": {_FIELD_HINTS[key]}')
    return "{\n" + ",\n".join(lines) + "\n}"


def build_prompt(request: AnalysisRequest) -> str:
    """Build the per-request prompt, ending with the required JSON shape."""
    return f"""Perform a deep forensic scan on this product URL: {request.url}

Step 1: Grounding Search
Use your search tool to find this specific product/seller. Check for consumer reports or Reddit discussions about its legitimacy.

Step 2: Linguistic Analysis
If you were to see reviews on this platform ({request.hostname}), what linguistic markers (pros/cons) are typical for this specific item?

Step 3: Score Compilation
Calculate a Trust Score (0-100) based on:
- Seller Authenticity (30%)
- Price Realism (30%)
- Linguistic Pattern Match (40%)

If the URL is an official brand website (Dell, Apple, Amazon), score higher.
If the URL is unknown or suspicious, score lower.

Response Format (Valid JSON ONLY):
{response_shape()}"""
