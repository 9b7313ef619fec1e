# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import pytest

from storypipe.storyir import *
from storypipe.plaintext.export import convert_to_plaintext, escape_entry, OPCODE_TABLE, PlainTextExportVisitor
from storypipe.plaintext.reader import read_plaintext, PlainTextSyntaxError
from storypipe.exceptions import SPInternalError

def _story() -> Story:
  return Story("jp", [
    TalkAction("Hi;", [1], ["Kasumi"], "v/1.mp3"),
    TalkAction("Hi;", [1], ["Kasumi"]),
    BlockingAction([DelayAction(1.5), ChangeBGMAction("v/1.mp3")]),
    HideModelAction(2),
    WaitForTapAction(),
  ])

def test_opcodes_cover_all_actions():
  assert set(OPCODE_TABLE.keys()) == set(ALL_ACTION_TYPES)
  assert all(len(op) == 3 for op in OPCODE_TABLE.values())

def test_escape_entry():
  assert escape_entry("a;b") == "a\\;b"
  assert escape_entry("a\\b") == "a\\\\b"

def test_output_format():
  expected = (
    ".text\n"
    "t0: Hi\\;;\n"
    "t1: Kasumi;\n"
    "\n"
    ".path\n"
    "p0: v/1.mp3;\n"
    "\n"
    ".code\n"
    "tlk    t0, [#1], [t1], p0\n"
    "tlk    t0, [#1], [t1]\n"
    "blk    $sub_0\n"
    "mdh    #2\n"
    "wft\n"
    "\n"
    "sub_0:\n"
    "slp    #1.5\n"
    "cbm    p0\n"
  )
  assert convert_to_plaintext(_story()) == expected

def test_nested_blocks_are_numbered_innermost_first():
  story = Story("jp", [ForkTaskAction([BlockingAction([WaitForAllAction()])])])
  text = convert_to_plaintext(story)
  assert "tsk    $sub_1\n" in text
  assert "sub_0:\nwfa\n" in text
  assert "sub_1:\nblk    $sub_0\n" in text

def test_position_format():
  story = Story("jp", [ShowModelAction(1, "m", Position(PositionBase.RIGHT_INSIDE, -3.0))])
  assert "mds    #1, p0, {#9, #-3.0}\n" in convert_to_plaintext(story)

def test_round_trip():
  story = _story()
  story.emit(ShowModelAction(1, "live2d/001", Position(PositionBase.LEFT, 12.0)))
  story.emit(ForkTaskAction([ForkTaskAction([TelopAction("line1\nline2")]), ShakeScreenAction(0.5)]))
  story.emit(TalkAction("back\\slash", [], []))
  assert read_plaintext(convert_to_plaintext(story), "jp") == story

def test_visitor_rejects_unknown_text():
  visitor = PlainTextExportVisitor([], [])
  with pytest.raises(SPInternalError):
    TelopAction("missing").accept(visitor)

def test_unknown_opcode():
  with pytest.raises(PlainTextSyntaxError) as excinfo:
    read_plaintext(".text\n\n.path\n\n.code\nxyz\n", "jp")
  assert excinfo.value.line == 6

def test_bad_reference():
  with pytest.raises(PlainTextSyntaxError):
    read_plaintext(".text\nt0: a;\n\n.path\n\n.code\ntlp    t1\n", "jp")

def test_recursive_sub_block():
  with pytest.raises(PlainTextSyntaxError):
    read_plaintext(".text\n\n.path\n\n.code\nblk    $sub_0\n\nsub_0:\nblk    $sub_0\n", "jp")

def test_missing_section():
  with pytest.raises(PlainTextSyntaxError):
    read_plaintext(".code\n", "jp")
