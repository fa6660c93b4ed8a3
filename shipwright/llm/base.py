"""Generation backend protocol and the shared instruction template."""

from typing import Protocol

PROJECT_INSTRUCTIONS = """
I need you to generate code for a web application based on the following requirements:

{prompt}

Please provide ALL the code files needed for this project including:
1. React components (.jsx/.tsx files)
2. CSS/Styling files
3. Configuration files (like package.json, vite.config.js, etc.)
4. Any utility functions or hooks
5. Main entry points (index.html, main.jsx, App.jsx, etc.)

For each code file, please use the format:
```language
// filename: path/to/filename.ext
// Code content here
```
Replace 'language' with the appropriate language identifier (e.g. javascript, jsx, css, json, html).
Put the '// filename: ...' comment on the line immediately after the opening backticks.

DO NOT try to execute npm or npx commands - just provide the code files.
I will handle the setup and installation myself.
"""


def build_generation_prompt(prompt: str) -> str:
    """Wrap the user's project description in the file-format instructions."""
    return PROJECT_INSTRUCTIONS.format(prompt=prompt.strip())


class GenerationBackend(Protocol):
    """Protocol for text-generation backends (OpenAI Assistants, Claude, Gemini)."""

    name: str

    def generate(self, prompt: str) -> str:
        """Return the backend's full raw text answer for a project description."""
        ...
