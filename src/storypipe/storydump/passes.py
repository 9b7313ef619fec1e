# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import argparse
import typing

from ..pipeline import *
from ..storyir import Story
from .export import convert_to_storydump

@TransformArgumentGroup('storydump', "Options for story dump")
@BackendDecl('storydump', input_decl=Story, output_decl=IODecl('<output file>', nargs=1))
class _StoryDumpExport(TransformBase):
  _allow_closures : typing.ClassVar[bool] = True

  @staticmethod
  def install_arguments(argument_group : argparse._ArgumentGroup):
    argument_group.add_argument("--storydump-no-closures", action="store_true", help="Print nested blocks inline as arrays instead of indented closures")

  @staticmethod
  def handle_arguments(args : argparse.Namespace):
    _StoryDumpExport._allow_closures = not args.storydump_no_closures

  def run(self) -> None:
    write_text_output(self.output, [convert_to_storydump(story, _StoryDumpExport._allow_closures) for story in self.inputs])
