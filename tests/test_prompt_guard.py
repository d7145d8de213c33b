from __future__ import annotations

import pytest

from qshell.core.prompt_guard import GuardState, KeyAction, PromptGuard

PROMPT = "alice@box:~$ "


@pytest.fixture
def guard() -> PromptGuard:
    guard = PromptGuard()
    guard.display_prompt(PROMPT)
    return guard


def type_text(guard: PromptGuard, text: str) -> None:
    for char in text:
        assert guard.handle_key(KeyAction.TEXT, char).accepted


def test_first_prompt_has_no_leading_newline(guard: PromptGuard) -> None:
    assert guard.content == PROMPT
    assert guard.prompt_boundary == len(PROMPT)
    assert guard.cursor == guard.prompt_boundary
    assert not guard.is_first_prompt


def test_backspace_never_crosses_boundary(guard: PromptGuard) -> None:
    type_text(guard, "ls")
    assert guard.handle_key(KeyAction.BACKSPACE).accepted
    assert guard.handle_key(KeyAction.BACKSPACE).accepted
    assert not guard.handle_key(KeyAction.BACKSPACE).accepted
    assert guard.content == PROMPT


def test_left_arrow_stops_at_boundary(guard: PromptGuard) -> None:
    type_text(guard, "ab")
    assert guard.handle_key(KeyAction.LEFT).accepted
    assert guard.handle_key(KeyAction.LEFT).accepted
    assert not guard.handle_key(KeyAction.LEFT).accepted
    assert guard.cursor == guard.prompt_boundary


def test_text_inserts_at_cursor(guard: PromptGuard) -> None:
    type_text(guard, "lsa")
    guard.handle_key(KeyAction.LEFT)
    type_text(guard, " -l")
    assert guard.current_input() == "ls -la"
    assert guard.prompt_boundary == len(PROMPT)


def test_up_and_cut_are_suppressed(guard: PromptGuard) -> None:
    type_text(guard, "echo")
    guard.set_cursor(len(guard.content), anchor=guard.prompt_boundary)
    assert not guard.handle_key(KeyAction.UP).accepted
    assert not guard.handle_key(KeyAction.DOWN).accepted
    assert not guard.handle_key(KeyAction.CUT).accepted
    assert guard.current_input() == "echo"


def test_selection_reaching_into_prompt_is_protected(guard: PromptGuard) -> None:
    type_text(guard, "echo")
    guard.set_cursor(len(guard.content), anchor=0)
    assert not guard.handle_key(KeyAction.BACKSPACE).accepted
    assert not guard.handle_key(KeyAction.DELETE).accepted
    assert not guard.handle_key(KeyAction.TEXT, "x").accepted
    assert guard.content == PROMPT + "echo"


def test_selection_inside_input_can_be_replaced(guard: PromptGuard) -> None:
    type_text(guard, "echo hi")
    start = guard.prompt_boundary + len("echo ")
    guard.set_cursor(len(guard.content), anchor=start)
    assert guard.handle_key(KeyAction.TEXT, "yo").accepted
    assert guard.current_input() == "echo yo"


def test_paste_before_boundary_is_suppressed(guard: PromptGuard) -> None:
    guard.set_cursor(3)
    assert not guard.handle_key(KeyAction.PASTE, "rm -rf").accepted
    guard.set_cursor(len(guard.content))
    assert guard.handle_key(KeyAction.PASTE, "ls").accepted
    assert guard.content == PROMPT + "ls"


def test_text_typed_inside_prompt_is_suppressed(guard: PromptGuard) -> None:
    guard.set_cursor(2)
    assert not guard.handle_key(KeyAction.TEXT, "x").accepted
    assert guard.content == PROMPT


def test_home_goes_to_boundary(guard: PromptGuard) -> None:
    type_text(guard, "pwd")
    guard.handle_key(KeyAction.HOME)
    assert guard.cursor == guard.prompt_boundary
    guard.handle_key(KeyAction.END)
    assert guard.cursor == len(guard.content)


def test_prompt_region_never_altered_by_edit_sequences(guard: PromptGuard) -> None:
    sequence = [
        (KeyAction.TEXT, "a"),
        (KeyAction.LEFT, ""),
        (KeyAction.LEFT, ""),
        (KeyAction.BACKSPACE, ""),
        (KeyAction.PASTE, "zz"),
        (KeyAction.BACKSPACE, ""),
        (KeyAction.BACKSPACE, ""),
        (KeyAction.BACKSPACE, ""),
        (KeyAction.BACKSPACE, ""),
        (KeyAction.LEFT, ""),
        (KeyAction.DELETE, ""),
    ]
    for position in (0, 5, len(PROMPT) - 1, len(PROMPT)):
        guard.set_cursor(position)
        for action, text in sequence:
            guard.handle_key(action, text)
            assert guard.content[: guard.prompt_boundary] == PROMPT


def test_submit_extracts_trimmed_command(guard: PromptGuard) -> None:
    type_text(guard, "  ls -la  ")
    result = guard.handle_key(KeyAction.SUBMIT)
    assert result.accepted
    assert result.command == "ls -la"
    assert guard.state is GuardState.SUBMITTING
    assert guard.content.endswith("\n")


def test_empty_submit_returns_empty_command(guard: PromptGuard) -> None:
    result = guard.handle_key(KeyAction.SUBMIT)
    assert result.command == ""
    assert guard.display_prompt(PROMPT)
    assert guard.content == PROMPT + "\n" + PROMPT


def test_submit_is_dropped_when_prompt_is_missing(guard: PromptGuard) -> None:
    guard.content = "garbage"
    guard.cursor = len(guard.content)
    result = guard.handle_key(KeyAction.SUBMIT)
    assert not result.accepted
    assert result.command is None
    assert guard.state is GuardState.AWAITING_INPUT


def test_keys_are_ignored_until_next_prompt(guard: PromptGuard) -> None:
    type_text(guard, "sleep 1")
    guard.handle_key(KeyAction.SUBMIT)
    assert not guard.handle_key(KeyAction.TEXT, "x").accepted
    guard.append_output("done\n")
    guard.display_prompt(PROMPT)
    assert guard.handle_key(KeyAction.TEXT, "x").accepted


def test_output_then_prompt_starts_on_new_line(guard: PromptGuard) -> None:
    type_text(guard, "echo hi")
    guard.handle_key(KeyAction.SUBMIT)
    guard.append_output("hi")
    guard.display_prompt(PROMPT)
    assert guard.content == PROMPT + "echo hi\nhi\n" + PROMPT
    assert guard.prompt_boundary == len(guard.content)


def test_duplicate_prompt_is_not_stacked(guard: PromptGuard) -> None:
    before = guard.content
    assert not guard.display_prompt(PROMPT)
    assert guard.content == before


def test_clear_screen_resets_and_redisplays(guard: PromptGuard) -> None:
    type_text(guard, "ls")
    guard.handle_key(KeyAction.SUBMIT)
    guard.append_output("a\nb\n")
    result = guard.handle_key(KeyAction.CLEAR_SCREEN)
    assert result.clear_screen
    guard.clear_screen("alice@box:/tmp$ ")
    assert guard.content == "alice@box:/tmp$ "
    assert guard.prompt_boundary == len("alice@box:/tmp$ ")
    assert guard.state is GuardState.AWAITING_INPUT


def test_select_all_covers_only_input(guard: PromptGuard) -> None:
    type_text(guard, "cat x")
    guard.handle_key(KeyAction.SELECT_ALL)
    assert guard.selected_text() == "cat x"
    assert guard.handle_key(KeyAction.BACKSPACE).accepted
    assert guard.content == PROMPT
