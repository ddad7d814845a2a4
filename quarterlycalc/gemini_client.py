"""Gemini CLI client for best-effort prompts with JSON answers."""

import json
import shutil
import subprocess

JSON_INSTRUCTIONS = """

Respond with ONLY a JSON object - no markdown code blocks, no explanations,
no commentary. Your entire response must be parseable by a JSON parser."""


def is_available() -> bool:
    """True if the gemini executable is on PATH."""
    return shutil.which("gemini") is not None


def _run_gemini_cli(
    prompt: str,
    timeout: int = 60,
) -> str:
    """
    Run Gemini CLI with a prompt and return raw output.

    Args:
        prompt: The prompt to send to Gemini.
        timeout: Timeout in seconds (default 60).

    Returns:
        The raw stdout from Gemini CLI.

    Raises:
        RuntimeError: If Gemini CLI is missing, fails or times out.
    """
    cmd = [
        'gemini',
        '--allowed-mcp-server-names', 'none',
        '-o', 'text',
        prompt
    ]

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout
        )
        return result.stdout.strip()

    except FileNotFoundError as e:
        raise RuntimeError("Gemini CLI not found on PATH") from e
    except subprocess.TimeoutExpired:
        raise RuntimeError(f"Gemini CLI timed out after {timeout}s")
    except subprocess.CalledProcessError as e:
        raise RuntimeError(
            f"Gemini CLI failed with exit code {e.returncode}.\n"
            f"Stderr: {e.stderr}"
        ) from e


def extract_json(response_str: str) -> dict:
    """Pull the JSON object out of a model response.

    Handles markdown code fences and leading/trailing prose.

    Raises:
        ValueError: If no JSON object can be parsed.
    """
    if '```json' in response_str:
        response_str = response_str.split('```json')[1].split('```')[0].strip()
    elif '```' in response_str:
        response_str = response_str.split('```')[1].split('```')[0].strip()

    if not response_str.strip().startswith('{'):
        start = response_str.find('{')
        end = response_str.rfind('}') + 1
        if start >= 0 and end > start:
            response_str = response_str[start:end]

    try:
        parsed = json.loads(response_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not parse JSON from Gemini response: {e}") from e
    if not isinstance(parsed, dict):
        raise ValueError("Gemini response JSON is not an object")
    return parsed


def process_prompt(
    prompt: str,
    timeout: int = 60,
) -> dict:
    """
    Send a prompt to Gemini CLI and return the parsed JSON answer.

    Args:
        prompt: The task description, including the expected JSON shape.
        timeout: Timeout in seconds (default 60).

    Returns:
        The parsed JSON object.

    Raises:
        RuntimeError: If Gemini CLI fails or times out.
        ValueError: If the response is not a JSON object.
    """
    response = _run_gemini_cli(prompt + JSON_INSTRUCTIONS, timeout=timeout)
    return extract_json(response)
