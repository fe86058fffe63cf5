# src/prompts/builder.py — v1
"""Instruction templates sent to the generative model.

Three templates, one per analysis mode. Each embeds the JSON shape the model
is asked to populate; the field lists are exported alongside the text so the
parser and tests can reason about the expected schema. Pure functions, no
I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from checkwise.core.models import AnalysisMode, mode_for

PROMPT_ONLY_FIELDS = ("type", "userInput", "response", "explanation", "suggestions")
IMAGE_FIELDS = (
    "question",
    "studentAnswer",
    "isCorrect",
    "correctAnswer",
    "explanation",
    "mistakes",
    "suggestions",
)
INSTRUCTION_FIELDS = (
    "question",
    "studentAnswer",
    "isCorrect",
    "correctAnswer",
    "explanation",
    "analysis",
    "mistakes",
    "suggestions",
)

_PROMPT_ONLY_TEMPLATE = """\
You are an expert tutor. The student has asked the following question or provided the following text:

"{prompt}"

Please analyze this and provide:
1. If it's a question, provide a detailed answer with explanation
2. If it's an answer to check, evaluate its correctness and provide feedback
3. Provide suggestions for better understanding

Format your response as JSON with the following structure:
{{
    "type": "question" or "answer_check",
    "userInput": "the student's text",
    "response": "your detailed response",
    "explanation": "detailed explanation",
    "suggestions": ["helpful suggestions"]
}}
"""

_IMAGE_ONLY_TEMPLATE = """\
You are an expert tutor. A student has submitted an image with their answer to a question.

Extracted text from image: "{extracted_text}"

Please analyze the image and:
1. Identify the question being asked
2. Review the student's answer
3. Check if the answer is correct or incorrect
4. Provide the correct answer with detailed explanation
5. Point out any mistakes or areas for improvement
6. Give helpful suggestions for better understanding

Format your response as JSON with the following structure:
{{
    "question": "the question identified",
    "studentAnswer": "the student's answer",
    "isCorrect": true/false,
    "correctAnswer": "the correct answer",
    "explanation": "detailed explanation",
    "mistakes": ["list of mistakes if any"],
    "suggestions": ["helpful suggestions"]
}}
"""

_IMAGE_WITH_INSTRUCTION_TEMPLATE = """\
You are an expert tutor. A student has uploaded an image and provided the following instruction:

User's instruction: "{prompt}"

Extracted text from image: "{extracted_text}"

Please analyze the image according to the user's instruction and provide a detailed response.

Format your response as JSON with the following structure:
{{
    "question": "the question identified (if any)",
    "studentAnswer": "the student's answer (if any)",
    "isCorrect": true/false (if applicable),
    "correctAnswer": "the correct answer (if applicable)",
    "explanation": "detailed explanation",
    "analysis": "your analysis based on user's instruction",
    "mistakes": ["list of mistakes if any"],
    "suggestions": ["helpful suggestions"]
}}
"""


@dataclass(frozen=True)
class BuiltPrompt:
    """Instruction text plus the schema the model was asked to fill."""

    mode: AnalysisMode
    text: str
    expected_fields: tuple[str, ...]
    optional_fields: tuple[str, ...] = field(default_factory=tuple)

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(f for f in self.expected_fields if f not in self.optional_fields)


def build_prompt(
    prompt_text: str | None,
    extracted_text: str | None,
    has_image: bool,
) -> BuiltPrompt:
    """Build the model instruction for a request.

    Args:
        prompt_text: The student's prompt or instruction, None if absent.
        extracted_text: OCR text of the uploaded image ("" or None if none).
        has_image: Whether an image accompanies the request.

    Returns:
        BuiltPrompt for the selected mode.

    Raises:
        ValueError: If neither a prompt nor an image is present.
    """
    prompt = prompt_text.strip() if prompt_text and prompt_text.strip() else None
    extracted = extracted_text or ""
    mode = mode_for(prompt is not None, has_image)

    if mode is AnalysisMode.PROMPT_ONLY:
        return BuiltPrompt(
            mode=mode,
            text=_PROMPT_ONLY_TEMPLATE.format(prompt=prompt),
            expected_fields=PROMPT_ONLY_FIELDS,
        )

    if mode is AnalysisMode.IMAGE_ONLY:
        return BuiltPrompt(
            mode=mode,
            text=_IMAGE_ONLY_TEMPLATE.format(extracted_text=extracted),
            expected_fields=IMAGE_FIELDS,
        )

    return BuiltPrompt(
        mode=mode,
        text=_IMAGE_WITH_INSTRUCTION_TEMPLATE.format(
            prompt=prompt, extracted_text=extracted
        ),
        expected_fields=INSTRUCTION_FIELDS,
        optional_fields=("question", "studentAnswer", "isCorrect", "correctAnswer"),
    )
