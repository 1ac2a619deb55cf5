"""Prompt construction and user-facing bot texts.

The system message pins the model to the template: it may only rewrite the
text after each colon. Nothing downstream checks the output, so these rules
are the only thing keeping the reply in template shape.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from themefather.platforms import Platform

COMMANDS_HELP = (
    "Available commands:\n"
    "/createIosTheme     - Create theme for iOS\n"
    "/createAndroidTheme - Create theme for Android\n"
    "/createMacosTheme   - Create theme for macOS\n"
    "/createWindowsTheme - Create theme for Windows\n"
    "/reset              - Reset current theme creation process"
)

WELCOME_MESSAGE = (
    "Welcome to Theme Father Bot! 🎨\n"
    "I can help you create Telegram themes for different platforms.\n\n" + COMMANDS_HELP
)

RESET_MESSAGE = "Theme creation process has been reset.\n\n" + COMMANDS_HELP

SYNTHESIS_FAILED_MESSAGE = (
    "Sorry, I couldn't create your theme this time. Pick a platform again to give it another try.\n\n"
    + COMMANDS_HELP
)

EMPTY_THEME_MESSAGE = "The model finished without producing a theme. Pick a platform again to retry."

SYSTEM_PROMPT_TEMPLATE = """You are a specialized theme generator that strictly follows templates.
Your sole purpose is to generate theme configurations by modifying values while preserving the exact structure and format of the template.

STRICT RULES:
1. Output MUST be EXACTLY in the same format as the template below
2. Every line MUST follow the pattern "key: value"
3. Each key-value pair MUST be on its own line
4. Never concatenate or combine values
5. Every color value MUST be a complete hex code (e.g., #FF5500)
6. Preserve ALL whitespace and indentation exactly as shown
7. Do not add ANY explanatory text or comments
8. Do not add or remove ANY lines from the template

Here is the exact template to follow. Replace ONLY the values after each colon:
```
{template}
```

IMPORTANT: Your entire response must be an exact copy of this template with only the values changed. Nothing more, nothing less."""

USER_PROMPT_TEMPLATE = """Create a {target} based on this description:
{description}

Keep every field name exactly as it is in the template and only change the values.
Template:
```
{template}
```"""


class PromptMessage(BaseModel):
    """One chat message sent to the completion API."""

    role: Literal["system", "user"]
    content: str


def platform_prompt(platform: Platform) -> str:
    return f"Starting drawing the theme for {platform.value}! Please describe how you want your theme to look:"


def processing_message(platform: Platform) -> str:
    return (
        f"Got your description! I'm now creating a {platform.value} theme based on your prompt \n\n"
        "Processing, this may take a few minutes..."
    )


def system_message(template: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(template=template)


def build_messages(template: str, description: str, *, platform: Platform | None = None) -> list[PromptMessage]:
    """Build the system and user messages for one theme request.

    ``description`` is passed through untouched; it may be empty or in any language.
    """
    target = f"{platform.value} theme" if platform is not None else "theme"
    return [
        PromptMessage(role="system", content=system_message(template)),
        PromptMessage(
            role="user",
            content=USER_PROMPT_TEMPLATE.format(target=target, description=description, template=template),
        ),
    ]
