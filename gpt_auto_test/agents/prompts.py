"""Prompt templates for the implementation and test agents."""

IMPLEMENTER_SYSTEM = "You are a Python expert who can implement the given function."

IMPLEMENTER_READ_STUB = "Read this incomplete Python code:\n```{{language}}\n{{stub}}\n```"

IMPLEMENTER_INSTRUCTION = (
    "Complete the Python code that follows this instruction: '{{description}}'. "
    "Your response must start with code block '```{{language}}'."
)

TESTER_SYSTEM = "You are a Python expert who can generate perfect tests for the given function."

TESTER_READ_FUNCTION = "Read this Python function:\n```{{language}}\n{{source}}\n```"

TESTER_NAMED_TEST = (
    "Write a test case `{{test_name}}` for the function in Markdown code snippet style. "
    "Your response must start with code block '```{{language}}'."
)

TESTER_ANY_TESTS = (
    "Write a test case for the function as much as possible in Markdown code snippet style. "
    "Your response must start with code block '```{{language}}'."
)


def render(template: str, **values: str) -> str:
    """Fill ``{{name}}`` placeholders; other braces are left alone."""
    prompt = template
    for key, value in values.items():
        prompt = prompt.replace("{{" + key + "}}", value)
    return prompt
