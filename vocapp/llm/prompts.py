# FILE: vocapp/llm/prompts.py
"""
Prompt construction for the agent and the execution summarizer.

The agent must answer with exactly one JSON object:
    {"type": "reply", "message": "..."}
    {"type": "command", "message": "...", "command": "..."}
"""
from __future__ import annotations

import sys
from typing import Dict, List, Optional, Sequence

from vocapp.execution.schemas import ExecutionResult
from vocapp.session.memory import SessionMemory

PROMPT_MAX_CHARS = 12000
MEMORY_NOTE_LINES = 5

FEW_SHOT_POSIX = """
Examples (system: posix):

User: open the folder AndroidDevelpment
{"type":"command","message":"Opening AndroidDevelpment.","command":"xdg-open AndroidDevelpment"}

User: how many folders are in Roblox
{"type":"command","message":"Counting folders in Roblox.","command":"ls -d Roblox/*/"}

User: lista los archivos de FutbolDB
{"type":"command","message":"Listing FutbolDB.","command":"ls -la FutbolDB"}

User: create a folder called projects
{"type":"command","message":"Creating folder projects.","command":"mkdir projects"}

User: delete the file test.txt
{"type":"command","message":"Deleting test.txt.","command":"rm test.txt"}

User: copy config.json to the backup folder
{"type":"command","message":"Copying config.json.","command":"cp config.json backup/"}

User: how much free disk space is there
{"type":"command","message":"Checking disk space.","command":"df -h"}

User: rename the folder Unity to Unity2024
{"type":"command","message":"Renaming folder.","command":"mv Unity Unity2024"}
"""

FEW_SHOT_WINDOWS = """
Examples (system: windows):

User: open the folder AndroidDevelpment
{"type":"command","message":"Opening AndroidDevelpment.","command":"explorer AndroidDevelpment"}

User: lista los archivos de FutbolDB
{"type":"command","message":"Listing FutbolDB.","command":"dir FutbolDB"}

User: create a folder called projects
{"type":"command","message":"Creating folder projects.","command":"mkdir projects"}

User: delete the file test.txt
{"type":"command","message":"Deleting test.txt.","command":"del test.txt"}

User: rename the folder Unity to Unity2024
{"type":"command","message":"Renaming folder.","command":"rename Unity Unity2024"}
"""

FEW_SHOT_COMMON = """
User: hi, how are you
{"type":"reply","message":"Hi! What can I do for you?"}

User: no era esa carpeta sino FutbolDB
{"type":"reply","message":"Got it, FutbolDB. What do you want to do with it?"}

User: thanks
{"type":"reply","message":"You're welcome. Anything else?"}
"""

RULES = (
    "You are a local PC agent. "
    'ALWAYS answer with valid JSON: {"type":"reply","message":"..."} or '
    '{"type":"command","message":"...","command":"..."}. '
    'Use "reply" for questions, confirmations or information you already have. '
    'Use "command" only when the user asks to run something. '
    "Be brief: one or two sentences unless detail is requested. "
    "Never list folders or files unless explicitly asked. "
    "Never invent file or folder contents. "
    "A command is a single line: one program plus arguments. "
    "Never use pipes (|), redirection (>, >>) or operators (&&, ;). "
    "To count folders use: ls -d */ "
    "Write nothing outside the JSON. "
    "Reply in the user's language."
)

SUMMARY_RULES = (
    "You are a filesystem assistant. Summarize ONLY from the evidence given. "
    "Invent nothing. If the evidence is not enough, say so plainly. "
    "Be brief. First explain what the project is for, then name 3-6 key components. "
    "Reply in the user's language."
)


def trim_for_prompt(text: Optional[str], max_len: int = PROMPT_MAX_CHARS) -> str:
    value = text or ""
    if len(value) <= max_len:
        return value
    return f"{value[:max_len]}\n...[truncated {len(value) - max_len} characters]"


def build_system_prompt(
    memory: SessionMemory,
    workdir: str,
    available_dirs: Sequence[str] = (),
    platform: Optional[str] = None,
) -> str:
    platform = platform or sys.platform
    few_shot = FEW_SHOT_WINDOWS if platform.startswith("win") else FEW_SHOT_POSIX
    notes = memory.context_digest().split("\n")[-MEMORY_NOTE_LINES:] if memory.notes else []

    lines = [
        RULES,
        "\nUsage examples:\n" + few_shot + FEW_SHOT_COMMON,
        "Current context:",
        f"- Working directory: {workdir}",
        f"- Available folders: {', '.join(available_dirs) if available_dirs else 'none'}",
        f"- Last target: {memory.last_target or 'none'}",
        f"- Last action: {memory.last_action or 'none'}",
        f"- Last command: {memory.last_command or 'none'}",
        f"- Operating system: {platform}",
    ]
    if notes:
        lines.append("Memory:\n" + "\n".join(notes))
    return "\n".join(lines)


def build_user_message(text: str, resolved_target: Optional[str], memory: SessionMemory) -> Dict[str, str]:
    content = f"Request: {text}"
    if resolved_target:
        content += f"\nResolved target: {resolved_target}"
    if memory.last_target:
        content += f"\nLast target: {memory.last_target}"
    return {"role": "user", "content": content}


def build_summary_messages(
    user_text: str,
    execution: ExecutionResult,
    target: Optional[str] = None,
) -> List[Dict[str, str]]:
    parts = [
        f"Original request: {user_text or '(none)'}",
        f"Confirmed target: {target}" if target else "",
        f"Command: {execution.command}",
        f"Working directory: {execution.cwd}",
        f"OK: {execution.ok}",
        f"Error: {execution.error}" if execution.error else "",
        f"STDOUT:\n{trim_for_prompt(execution.stdout)}",
        f"STDERR:\n{trim_for_prompt(execution.stderr)}",
    ]
    return [{"role": "user", "content": "\n\n".join(p for p in parts if p)}]
