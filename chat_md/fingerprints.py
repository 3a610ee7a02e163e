"""Stable hashes of prompt/response pairs, for spotting repeated turns."""

import hashlib
import re
from dataclasses import dataclass

PROMPT_LABEL_RE = re.compile(r"\*\*Prompt\*\*", re.I)
RESPONSE_LABEL_RE = re.compile(r"\*\*Response\*\*", re.I)
QUOTE_MARKER_RE = re.compile(r"^\s*>\s?")
ANCHOR_LINE_RE = re.compile(r'^[ \t]*<a id="p-\d+"></a>[ \t]*$', re.M | re.I)


@dataclass
class LogicalTurn:
    prompt: str
    response: str
    turn_index: int


def normalize_text(text: str) -> str:
    if not text:
        return ""
    text = text.replace("\r\n", "\n")
    text = re.sub(r"[ \t]+\n", "\n", text)
    return text.strip()


def hash_prompt_response_pair(prompt: str, response: str) -> str:
    combined = f"{normalize_text(prompt)}\n\n---\n\n{normalize_text(response)}"
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()


def extract_prompt_response_turns(markdown: str) -> list[LogicalTurn]:
    """Pair every **Prompt** label with the **Response** that follows it.

    The response runs up to the next **Prompt**. Parsing stops at a prompt
    with no response after it. Documents without any pair come back as a
    single turn holding the whole text as its response.
    """
    if not markdown or not isinstance(markdown, str):
        return []

    # anchors belong to the next prompt, not to the response before it
    text = ANCHOR_LINE_RE.sub("", markdown.replace("\r\n", "\n"))
    turns: list[LogicalTurn] = []

    for prompt_match in PROMPT_LABEL_RE.finditer(text):
        prompt_start = prompt_match.end()
        response_match = RESPONSE_LABEL_RE.search(text, prompt_start)
        if not response_match:
            break
        response_start = response_match.end()
        next_prompt = PROMPT_LABEL_RE.search(text, response_start)
        response_end = next_prompt.start() if next_prompt else len(text)

        raw_prompt = text[prompt_start:response_match.start()]
        prompt = normalize_text("\n".join(
            QUOTE_MARKER_RE.sub("", line) for line in raw_prompt.split("\n")))
        response = normalize_text(text[response_start:response_end])

        if prompt or response:
            turns.append(LogicalTurn(prompt=prompt, response=response, turn_index=len(turns)))

    if not turns:
        return [LogicalTurn(prompt="", response=normalize_text(text), turn_index=0)]
    return turns
