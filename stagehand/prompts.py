"""Prompt builders for the observe, extract and act inference calls."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

DEFAULT_OBSERVE_INSTRUCTION = (
    "Find elements that can be used for any future actions in the page. These may be "
    "navigation links, related pages, section/subsection links, buttons, or other "
    "interactive elements. Be comprehensive: if there are multiple elements that may be "
    "relevant for future actions, return all of them."
)

SUPPORTED_ACTIONS: tuple[str, ...] = (
    "click",
    "scrollIntoView",
    "scroll",
    "scrollTo",
    "nextChunk",
    "prevChunk",
    "fill",
    "type",
    "press",
    "selectOptionFromDropdown",
)


def _user_instructions_block(user_instructions: str | None) -> str | None:
    if user_instructions is None:
        return None
    instructions = user_instructions.strip()
    if not instructions:
        return None
    return (
        "\n\n# Custom Instructions Provided by the User\n\n"
        "Please keep the user's instructions in mind when performing actions. "
        "If the user's instructions are not relevant to the current task, ignore them.\n\n"
        f"User Instructions:\n{instructions}"
    )


def build_observe_system_prompt(user_instructions: str | None = None) -> str:
    """System prompt for finding elements that match an observe instruction."""
    base = (
        "You are helping the user automate the browser by finding elements based on what "
        "the user wants to observe in the page.\n\n"
        "You will be given:\n"
        "1. an instruction of elements to observe\n"
        "2. a hierarchical accessibility tree showing the semantic structure of the page. "
        "The tree is a hybrid of the DOM and the accessibility tree.\n\n"
        "Return an array of elements that match the instruction if they exist, otherwise "
        "return an empty array. Whenever suggesting actions, use supported playwright "
        "locator methods or preferably one of the following supported actions:\n"
        f"{', '.join(SUPPORTED_ACTIONS)}\n\n"
        "Respond with JSON: always return a JSON object with an `elements` array describing "
        "the matches. Each element must be an object with keys `element_id` (the backend DOM "
        "node id as an integer), `description` (a short natural language summary), `method` "
        "(one of the supported actions), and `arguments` (an array of strings for the action "
        "arguments)."
    )
    extra = _user_instructions_block(user_instructions)
    return base + extra if extra is not None else base


def build_observe_user_message(instruction: str, tree_elements: str) -> str:
    """User message carrying the observe instruction and the accessibility tree."""
    return f"instruction: {instruction}\nAccessibility Tree: {tree_elements}"


def build_extract_system_prompt(
    is_using_text_extract: bool, user_instructions: str | None = None
) -> str:
    """System prompt for extracting content from either page text or DOM elements."""
    if is_using_text_extract:
        content_detail = "A text representation of a webpage to extract information from."
        source_name = "text-rendered webpage"
        closing = (
            "Once you are given the text-rendered webpage, you must thoroughly and "
            "meticulously analyze it. Be very careful to ensure that you do not miss any "
            "important information."
        )
    else:
        content_detail = "A list of DOM elements to extract from."
        source_name = "DOM+accessibility tree elements"
        closing = (
            "If a user is attempting to extract links or URLs, you MUST respond with ONLY "
            "the IDs of the link elements.\n"
            "Do not attempt to extract links directly from the text unless absolutely "
            "necessary."
        )

    parts = [
        "You are extracting content on behalf of a user.\n"
        "If a user asks you to extract a 'list' of information, or 'all' information,\n"
        "YOU MUST EXTRACT ALL OF THE INFORMATION THAT THE USER REQUESTS.\n\n"
        "You will be given:\n"
        "1. An instruction\n"
        f"2. {content_detail}",
        f"Print the exact text from the {source_name} with all symbols, characters, and "
        "endlines as is.\n"
        "Print null or an empty string if no new information is found.",
        "Respond with JSON: your entire reply must be valid JSON that matches the requested "
        "schema or structure.",
        closing,
    ]
    extra = _user_instructions_block(user_instructions)
    if extra is not None:
        parts.append(extra)
    return "\n\n".join(parts)


def build_extract_user_prompt(instruction: str, tree_elements: str) -> str:
    """User message carrying the extract instruction and the DOM tree."""
    return f"Instruction: {instruction}\nDOM+accessibility tree: {tree_elements}"


def build_act_observe_prompt(
    action: str,
    supported_actions: Sequence[str] = SUPPORTED_ACTIONS,
    variables: Mapping[str, str] | None = None,
) -> str:
    """Instruction asking for the single element most relevant to an action."""
    prompt = (
        "Find the most relevant element to perform an action on given the following "
        f"action: {action}.\n"
        f"Provide an action for this element such as {', '.join(supported_actions)}, or any "
        "other playwright locator method. Remember that to users, buttons and links look the "
        "same in most cases.\n"
        "If the action is completely unrelated to a potential action to be taken on the page, "
        "return an empty array.\n"
        "ONLY return one action. If multiple actions are relevant, return the most relevant one."
    )
    if variables:
        lines = "".join(f"\n- %{name}%: {value}" for name, value in variables.items())
        prompt += "\n\nAvailable variables:" + lines
    return prompt


def effective_observe_instruction(user_instruction: str | None) -> str:
    """The user's instruction, or the default one when it is missing or blank."""
    if user_instruction is not None and user_instruction.strip():
        return user_instruction
    return DEFAULT_OBSERVE_INSTRUCTION