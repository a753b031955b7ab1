from __future__ import annotations

from langchain_core.prompts import PromptTemplate


# Upper bound on page characters sent to the model. Longer pages keep their
# prefix; the rest is dropped.
MAX_CONTENT_CHARS = 100_000


def build_summary_instructions() -> str:
    return (
        "Please provide a **highly detailed and verbose summary** of the following web page content.\n\n"
        "Structure:\n"
        "1. **Executive Summary**: A high-level overview.\n"
        "2. **Key Points**: Detailed bullet points of the main arguments/facts.\n"
        "3. **Analysis/Details**: deep dive into the specific content.\n\n"
        "Format the output with Markdown.\n\n"
        "Content:\n\n{content}"
    )


SUMMARY_PROMPT = PromptTemplate.from_template(build_summary_instructions())


def truncate_content(text: str, max_chars: int = MAX_CONTENT_CHARS) -> str:
    if max_chars < 0:
        raise ValueError("max_chars must be non-negative")
    return text[:max_chars]


def build_summary_prompt(text: str, max_chars: int = MAX_CONTENT_CHARS) -> str:
    return SUMMARY_PROMPT.format(content=truncate_content(text, max_chars))
