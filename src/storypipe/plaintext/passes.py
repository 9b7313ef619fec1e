# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import argparse
import typing

import chardet

from ..pipeline import *
from ..storyir import Story, Locale
from .export import convert_to_plaintext
from .reader import read_plaintext

@BackendDecl('plaintext-export', input_decl=Story, output_decl=IODecl('<output file>', nargs=1))
class _PlainTextExport(TransformBase):
  def run(self) -> None:
    write_text_output(self.output, [convert_to_plaintext(story) for story in self.inputs])

def _read_text_file(path : str) -> str:
  with open(path, "rb") as f:
    data = f.read()
  det = chardet.detect(data, should_rename_legacy=True)
  return data.decode(encoding=det["encoding"] or "utf-8", errors="ignore")

@TransformArgumentGroup('plaintext-import', "Options for plain-text import")
@FrontendDecl('plaintext-import', input_decl=IODecl('Plain-text story trace', match_suffix='txt', nargs='+'), output_decl=Story)
class _PlainTextImport(TransformBase):
  _locale : typing.ClassVar[Locale] = Locale.JP

  @staticmethod
  def install_arguments(argument_group : argparse._ArgumentGroup):
    argument_group.add_argument("--plaintext-import-locale", nargs=1, type=str, choices=[l.value for l in Locale], default=[Locale.JP.value], help="Locale of the imported story (not recorded in the text)")

  @staticmethod
  def handle_arguments(args : argparse.Namespace):
    locale = args.plaintext_import_locale
    if isinstance(locale, list):
      assert len(locale) == 1
      locale = locale[0]
    _PlainTextImport._locale = Locale.get(locale)

  def run(self) -> list[Story]:
    return [read_plaintext(_read_text_file(path), _PlainTextImport._locale) for path in self.inputs]
