#!/usr/bin/env python3
"""
Command Engine - turns an English instruction into one shell command via Ollama
"""

import enum
import logging
import platform
import re
from dataclasses import dataclass
from typing import List, Optional

import requests

import i18n
from errors import GenerationError

logger = logging.getLogger(__name__)

# Inference server configuration
OLLAMA_BASE_URL = "http://localhost:11434"
PROBE_TIMEOUT = 10
GENERATE_TIMEOUT = 300


class OSFamily(str, enum.Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


# OS family → (context label, example command for "list all files")
OS_CONTEXTS = {
    OSFamily.WINDOWS: ("Windows (Command Prompt/PowerShell)", "dir /a"),
    OSFamily.MACOS: ("macOS (Terminal)", "ls -la"),
    OSFamily.LINUX: ("Linux (Terminal)", "ls -la"),
}

PROMPT_TEMPLATE = """You are an expert translator that converts English instructions into a single, executable terminal command for {os_context}.

**RULES:**
1.  ONLY return the raw command appropriate for {os_context}.
2.  Do NOT include any explanation or natural language.
3.  Do NOT include markdown formatting like ``` or backticks (`).
4.  Use platform-specific commands (e.g., 'dir' on Windows, 'ls' on Unix/Linux/macOS).

**EXAMPLE:**
Instruction: list all files
Response: {example_command}

**TASK:**
Instruction: {instruction}
Response:"""

_FIRST_BACKTICK_SPAN = re.compile(r"`([^`]*)`")
_FENCE = "```"


@dataclass(frozen=True)
class ModelDescriptor:
    name: str


def detect_os_family(system: Optional[str] = None) -> OSFamily:
    """Map platform.system() onto the three supported families."""
    system = (system if system is not None else platform.system()).lower()
    if system.startswith("win"):
        return OSFamily.WINDOWS
    if system == "darwin":
        return OSFamily.MACOS
    return OSFamily.LINUX


def build_prompt(instruction: str, os_family: OSFamily) -> str:
    os_context, example_command = OS_CONTEXTS[OSFamily(os_family)]
    return PROMPT_TEMPLATE.format(
        os_context=os_context,
        example_command=example_command,
        instruction=instruction,
    )


def extract_command(raw_text: str) -> str:
    """
    Reduce a raw model reply to the bare command.

    A reply with backticks yields the inside of the first backtick pair.
    When there is no usable pair (an unterminated backtick, or a bare fence)
    fence markers are stripped and surrounding whitespace trimmed.
    """
    if not raw_text:
        return ""
    if "`" in raw_text:
        match = _FIRST_BACKTICK_SPAN.search(raw_text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return raw_text.replace(_FENCE, "").strip()


def is_available(base_url: str = OLLAMA_BASE_URL) -> bool:
    """Probe the Ollama listing endpoint. Never raises."""
    try:
        response = requests.get(f"{base_url}/api/tags", timeout=PROBE_TIMEOUT)
        response.raise_for_status()
        return isinstance(response.json(), dict)
    except (requests.RequestException, ValueError) as e:
        logger.debug("Ollama probe failed: %s", e)
        return False


def list_models(base_url: str = OLLAMA_BASE_URL) -> List[ModelDescriptor]:
    """Return installed models, or an empty list on any failure."""
    try:
        response = requests.get(f"{base_url}/api/tags", timeout=PROBE_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.debug("Listing models failed: %s", e)
        return []

    models = data.get("models") if isinstance(data, dict) else None
    if not isinstance(models, list):
        return []
    return [
        ModelDescriptor(name=m["name"])
        for m in models
        if isinstance(m, dict) and isinstance(m.get("name"), str) and m["name"]
    ]


class CommandEngine:
    """
    Sends one non-streaming generate request per instruction. No Rich, no
    prompt_toolkit: rendering belongs to the CLI.
    """

    def __init__(self, base_url: str = OLLAMA_BASE_URL, os_family: Optional[OSFamily] = None):
        self.base_url = base_url
        self.os_family = os_family or detect_os_family()

    def generate(self, model_name: str, instruction: str) -> str:
        """Return the extracted command, or raise GenerationError."""
        prompt = build_prompt(instruction, self.os_family)
        logger.debug("Generating with model=%s os=%s", model_name, self.os_family.value)

        try:
            response = requests.post(
                f"{self.base_url}/api/generate",
                json={"model": model_name, "prompt": prompt, "stream": False},
                timeout=GENERATE_TIMEOUT,
            )
        except requests.RequestException as e:
            raise GenerationError(i18n.t("error.generation_failed", cause=e)) from e

        if not response.ok:
            cause = i18n.t("error.http_status", status=response.status_code, reason=response.reason)
            raise GenerationError(i18n.t("error.generation_failed", cause=cause))

        try:
            raw_text = response.json().get("response")
        except (ValueError, AttributeError) as e:
            raise GenerationError(i18n.t("error.generation_failed", cause=e)) from e
        if not isinstance(raw_text, str):
            cause = i18n.t("error.malformed_response")
            raise GenerationError(i18n.t("error.generation_failed", cause=cause))

        logger.debug("Raw model response: %r", raw_text)
        command = extract_command(raw_text)
        if not command or command == "null" or "`" in command:
            raise GenerationError(i18n.t("error.empty_command"))
        return command
