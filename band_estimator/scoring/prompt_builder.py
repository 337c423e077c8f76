"""
Prompt Builder
band_estimator/scoring/prompt_builder.py

Renders the examiner instruction and the user payload sent to the scoring
model. Pure and deterministic: identical arguments give identical strings.
"""

from typing import Dict, Optional, Tuple

from band_estimator.models.enumerations import TaskCategory
from band_estimator.scoring.word_counter import count_words

DEFAULT_TASK_PROMPTS: Dict[TaskCategory, str] = {
    TaskCategory.TASK1: "Describe the information shown in the chart, graph, table or diagram.",
    TaskCategory.TASK2: "Present a clear position on the given topic with supporting arguments.",
}

RUBRIC = {
    "Task Achievement (TA)": {
        "9": "Fully addresses all parts of the task with a fully developed position.",
        "7": "Addresses all parts; presents a clear position, main ideas extended and supported.",
        "5": "Addresses the task only partially; limited development, some irrelevant detail.",
        "3": "Does not adequately address any part of the task; ideas largely undeveloped.",
    },
    "Coherence and Cohesion (CC)": {
        "9": "Cohesion attracts no attention; paragraphing is skilfully managed.",
        "7": "Logically organised with clear progression and a range of cohesive devices.",
        "5": "Some organisation but lacks overall progression; cohesive devices inadequate or overused.",
        "3": "Ideas not arranged coherently; very limited use of linking.",
    },
    "Lexical Resource (LR)": {
        "9": "Wide range of vocabulary used naturally and with full flexibility.",
        "7": "Sufficient range for flexibility and precision; some less common items.",
        "5": "Limited range, minimally adequate; noticeable errors in word choice and spelling.",
        "3": "Very limited range; errors may severely distort the message.",
    },
    "Grammatical Range and Accuracy (GRA)": {
        "9": "Wide range of structures with full flexibility and accuracy.",
        "7": "Variety of complex structures; frequent error-free sentences.",
        "5": "Limited range; attempts at complex sentences tend to be less accurate.",
        "3": "Very limited range; errors predominate.",
    },
}

INSTRUCTION_TEMPLATE = """You are a certified IELTS Writing examiner. Score the essay on the four official criteria:
- Task Achievement (TA)
- Coherence and Cohesion (CC)
- Lexical Resource (LR)
- Grammatical Range and Accuracy (GRA)

Band descriptors:
{rubric}

Return STRICT JSON only:
{{"ta":number,"cc":number,"lr":number,"gra":number,"overall":number,"feedback":"...","cefr":"A2|B1|B2|C1|C2"}}

Rules:
1. Bands 0-9 in 0.5 increments only
2. Be realistic and align with official IELTS descriptors
3. Feedback should be 2-4 sentences, specific and actionable
4. Return ONLY the JSON object, no extra text"""

STRICT_JSON_DIRECTIVE = (
    "IMPORTANT: Your previous response was not valid JSON. "
    "Return ONLY the JSON object with no additional text."
)

PAYLOAD_TEMPLATE = "TaskType: {task_type}\nWordCount: {word_count}\nPrompt: {prompt}\nEssay:\n{essay}"


def _render_rubric() -> str:
    lines = []
    for criterion, bands in RUBRIC.items():
        lines.append(f"{criterion}:")
        for band in sorted(bands, key=int, reverse=True):
            lines.append(f"  Band {band}: {bands[band]}")
    return "\n".join(lines)


def effective_task_prompt(task_category: TaskCategory, task_prompt: Optional[str]) -> str:
    """Caller's prompt, or the canonical one for the category when blank."""
    if task_prompt and task_prompt.strip():
        return task_prompt.strip()
    return DEFAULT_TASK_PROMPTS[task_category]


def build_prompt(
    task_category: TaskCategory,
    task_prompt: Optional[str],
    text: str,
    strict: bool = False,
) -> Tuple[str, str]:
    """
    Build (instruction_text, payload_text) for one scoring call.

    Args:
        task_category: Closed-set task category.
        task_prompt: Optional caller-supplied task prompt.
        text: Raw essay text, embedded unmodified.
        strict: Append the strict-JSON directive used when retrying.
    """
    task_category = TaskCategory.parse(task_category)
    instruction = INSTRUCTION_TEMPLATE.format(rubric=_render_rubric())
    if strict:
        instruction = f"{instruction}\n\n{STRICT_JSON_DIRECTIVE}"

    payload = PAYLOAD_TEMPLATE.format(
        task_type=task_category.value,
        word_count=count_words(text),
        prompt=effective_task_prompt(task_category, task_prompt),
        essay=text,
    )
    return instruction, payload
