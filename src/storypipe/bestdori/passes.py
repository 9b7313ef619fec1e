# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import argparse
import typing

from ..pipeline import *
from ..storyir import Story
from .export import export_bestdori

@TransformArgumentGroup('bestdori-export', "Options for Bestdori export")
@BackendDecl('bestdori-export', input_decl=Story, output_decl=IODecl('<output JSON file>', nargs=1))
class _BestdoriExport(TransformBase):
  _server : typing.ClassVar[int] = 0

  @staticmethod
  def install_arguments(argument_group : argparse._ArgumentGroup):
    argument_group.add_argument("--bestdori-server", nargs=1, type=int, default=[0], help="Server number written into the output")

  @staticmethod
  def handle_arguments(args : argparse.Namespace):
    server = args.bestdori_server
    if isinstance(server, list):
      assert len(server) == 1
      server = server[0]
    _BestdoriExport._server = server

  def run(self) -> None:
    if len(self.inputs) == 1:
      export_bestdori(self.inputs[0], self.output, _BestdoriExport._server)
    else:
      export_bestdori(self.inputs, self.output, _BestdoriExport._server)
