# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import argparse
import typing

from ..pipeline import *
from ..storyir import Story, Locale
from .asset import load_story_asset
from .convert import convert_from_bandori

@TransformArgumentGroup('bandori', "Options for Bandori story asset import")
@FrontendDecl('bandori', input_decl=IODecl('Bandori story asset JSON', match_suffix='json', nargs='+'), output_decl=Story)
class _BandoriImport(TransformBase):
  _locale : typing.ClassVar[Locale] = Locale.JP
  _voice_bundle : typing.ClassVar[str] = ""

  @staticmethod
  def install_arguments(argument_group : argparse._ArgumentGroup):
    argument_group.add_argument("--bandori-locale", nargs=1, type=str, choices=[l.value for l in Locale], default=[Locale.JP.value], help="Server region of the story assets")
    argument_group.add_argument("--bandori-voice-bundle", nargs=1, type=str, default=[''], help="Base path of the voice files (default: <locale>/sound/voice/scenario/<scenarioSceneId>)")

  @staticmethod
  def handle_arguments(args : argparse.Namespace):
    locale = args.bandori_locale
    if isinstance(locale, list):
      assert len(locale) == 1
      locale = locale[0]
    _BandoriImport._locale = Locale.get(locale)
    voice_bundle = args.bandori_voice_bundle
    if isinstance(voice_bundle, list):
      assert len(voice_bundle) == 1
      voice_bundle = voice_bundle[0]
    assert isinstance(voice_bundle, str)
    _BandoriImport._voice_bundle = voice_bundle.rstrip('/')

  def run(self) -> list[Story]:
    results = []
    for path in self.inputs:
      asset = load_story_asset(path)
      voice_bundle = _BandoriImport._voice_bundle
      if len(voice_bundle) == 0:
        voice_bundle = _BandoriImport._locale.value + "/sound/voice/scenario/" + asset.scenario_scene_id
      results.append(convert_from_bandori(asset, _BandoriImport._locale, voice_bundle))
    return results
