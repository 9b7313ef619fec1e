# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# Bandori 剧情资源 (scenario asset) 的数据结构
# 上游的 JSON 是 {"Base": {...}}，所有的枚举值都是整数
# 缺失的键一律当作零值/空值，不认识的枚举值当作该枚举的第一项

from __future__ import annotations

import dataclasses
import enum
import json
import typing

import chardet

class _AssetEnumBase(enum.Enum):
  # 不认识的值都当作第一项 (NONE / NOT_SET / NORMAL)，上游偶尔会加新的类型
  @classmethod
  def _missing_(cls, value):
    return next(iter(cls))

class ActionType(_AssetEnumBase):
  NONE = 0
  TALK = 1
  LAYOUT = 2
  INPUT = 3
  MOTION = 4
  SELECTABLE = 5
  EFFECT = 6
  SOUND = 7

class LayoutType(_AssetEnumBase):
  NONE = 0
  MOVE = 1
  APPEAR = 2
  HIDE = 3
  SHAKE_X = 4
  SHAKE_Y = 5

class Side(_AssetEnumBase):
  NONE = 0
  LEFT = 1
  LEFT_OVER = 2
  LEFT_INSIDE = 3
  CENTER = 4
  RIGHT = 5
  RIGHT_OVER = 6
  RIGHT_INSIDE = 7
  LEFT_UNDER = 8
  LEFT_INSIDE_UNDER = 9
  CENTER_UNDER = 10
  RIGHT_UNDER = 11
  RIGHT_INSIDE_UNDER = 12

class DepthType(_AssetEnumBase):
  NOT_SET = 0
  FRONT = 1
  BACK = 2

class MoveSpeedType(_AssetEnumBase):
  NORMAL = 0
  FAST = 1
  SLOW = 2

class EffectType(_AssetEnumBase):
  NONE = 0
  BLACK_IN = 1
  BLACK_OUT = 2
  WHITE_IN = 3
  WHITE_OUT = 4
  SHAKE_SCREEN = 5
  SHAKE_WINDOW = 6
  CHANGE_BACKGROUND = 7
  TELOP = 8
  FLASHBACK_IN = 9
  FLASHBACK_OUT = 10
  CHANGE_CARD_STILL = 11
  AMBIENT_COLOR_NORMAL = 12
  AMBIENT_COLOR_EVENING = 13
  AMBIENT_COLOR_NIGHT = 14
  PLAY_SCENARIO_EFFECT = 15
  STOP_SCENARIO_EFFECT = 16
  CHANGE_BACKGROUND_STILL = 17

# 读取 JSON 的辅助函数

def _get_int(data : dict, key : str) -> int:
  value = data.get(key)
  if isinstance(value, (int, float)):
    return int(value)
  return 0

def _get_float(data : dict, key : str) -> float:
  value = data.get(key)
  if isinstance(value, (int, float)):
    return float(value)
  return 0.0

def _get_str(data : dict, key : str) -> str:
  value = data.get(key)
  return value if isinstance(value, str) else ''

def _get_bool(data : dict, key : str) -> bool:
  # 上游用 0/1 表示布尔值
  value = data.get(key)
  if isinstance(value, bool):
    return value
  if isinstance(value, (int, float)):
    return value != 0
  return False

def _get_list(data : dict, key : str) -> list:
  value = data.get(key)
  return value if isinstance(value, list) else []

@dataclasses.dataclass
class AppearCharacter:
  character_id : int = 0
  costume_type : str = ''

  @staticmethod
  def from_json(data : dict) -> AppearCharacter:
    return AppearCharacter(_get_int(data, "characterId"), _get_str(data, "costumeType"))

@dataclasses.dataclass
class Snippet:
  action_type : ActionType = ActionType.NONE
  progress_type : int = 0 # 1 表示需要等待之前的所有动作结束
  reference_index : int = 0
  delay : float = 0.0 # 秒
  is_wait_for_skip_mode : bool = False

  @staticmethod
  def from_json(data : dict) -> Snippet:
    return Snippet(
      action_type=ActionType(_get_int(data, "actionType")),
      progress_type=_get_int(data, "progressType"),
      reference_index=_get_int(data, "referenceIndex"),
      delay=_get_float(data, "delay"),
      is_wait_for_skip_mode=_get_bool(data, "isWaitForSkipMode"),
    )

@dataclasses.dataclass
class TalkMotion:
  character_id : int = 0
  motion_name : str = ''
  expression_name : str = ''
  timing_sync_value : float = 0.0

  @staticmethod
  def from_json(data : dict) -> TalkMotion:
    return TalkMotion(
      character_id=_get_int(data, "characterId"),
      motion_name=_get_str(data, "motionName"),
      expression_name=_get_str(data, "expressionName"),
      timing_sync_value=_get_float(data, "timingSyncValue"),
    )

@dataclasses.dataclass
class TalkVoice:
  character_id : int = 0
  voice_id : str = ''
  volume : float = 0.0

  @staticmethod
  def from_json(data : dict) -> TalkVoice:
    return TalkVoice(_get_int(data, "characterId"), _get_str(data, "voiceId"), _get_float(data, "volume"))

@dataclasses.dataclass
class TalkData:
  talk_character_ids : list[int] = dataclasses.field(default_factory=list)
  window_display_name : str = ''
  body : str = ''
  tention : int = 0
  lip_sync_mode : int = 0
  motion_change_factor : int = 0
  motions : list[TalkMotion] = dataclasses.field(default_factory=list)
  voices : list[TalkVoice] = dataclasses.field(default_factory=list)
  speed : int = 0
  font_size : int = 0
  when_finish_close_window : bool = False
  require_play_effect : bool = False
  effect_reference_idx : int = 0
  require_play_sound : bool = False
  sound_reference_idx : int = 0
  when_start_hide_window : bool = False

  @staticmethod
  def from_json(data : dict) -> TalkData:
    return TalkData(
      talk_character_ids=[_get_int(c if isinstance(c, dict) else {}, "characterId") for c in _get_list(data, "talkCharacters")],
      window_display_name=_get_str(data, "windowDisplayName"),
      body=_get_str(data, "body"),
      tention=_get_int(data, "tention"),
      lip_sync_mode=_get_int(data, "lipSyncMode"),
      motion_change_factor=_get_int(data, "motionChangeFactor"),
      motions=[TalkMotion.from_json(m if isinstance(m, dict) else {}) for m in _get_list(data, "motions")],
      voices=[TalkVoice.from_json(v if isinstance(v, dict) else {}) for v in _get_list(data, "voices")],
      speed=_get_int(data, "speed"),
      font_size=_get_int(data, "fontSize"),
      when_finish_close_window=_get_bool(data, "whenFinishCloseWindow"),
      require_play_effect=_get_bool(data, "requirePlayEffect"),
      effect_reference_idx=_get_int(data, "effectReferenceIdx"),
      require_play_sound=_get_bool(data, "requirePlaySound"),
      sound_reference_idx=_get_int(data, "soundReferenceIdx"),
      when_start_hide_window=_get_bool(data, "whenStartHideWindow"),
    )

@dataclasses.dataclass
class LayoutData:
  type : LayoutType = LayoutType.NONE
  side_from : Side = Side.NONE
  side_from_offset_x : int = 0
  side_to : Side = Side.NONE
  side_to_offset_x : int = 0
  depth_type : DepthType = DepthType.NOT_SET
  character_id : int = 0
  costume_type : str = ''
  motion_name : str = ''
  expression_name : str = ''
  move_speed_type : MoveSpeedType = MoveSpeedType.NORMAL

  @staticmethod
  def from_json(data : dict) -> LayoutData:
    return LayoutData(
      type=LayoutType(_get_int(data, "type")),
      side_from=Side(_get_int(data, "sideFrom")),
      side_from_offset_x=_get_int(data, "sideFromOffsetX"),
      side_to=Side(_get_int(data, "sideTo")),
      side_to_offset_x=_get_int(data, "sideToOffsetX"),
      depth_type=DepthType(_get_int(data, "depthType")),
      character_id=_get_int(data, "characterId"),
      costume_type=_get_str(data, "costumeType"),
      motion_name=_get_str(data, "motionName"),
      expression_name=_get_str(data, "expressionName"),
      move_speed_type=MoveSpeedType(_get_int(data, "moveSpeedType")),
    )

@dataclasses.dataclass
class SpecialEffectData:
  effect_type : EffectType = EffectType.NONE
  string_val : str = ''
  string_val_sub : str = ''
  duration : float = 0.0
  animation_trigger_name : str = ''

  @staticmethod
  def from_json(data : dict) -> SpecialEffectData:
    return SpecialEffectData(
      effect_type=EffectType(_get_int(data, "effectType")),
      string_val=_get_str(data, "stringVal"),
      string_val_sub=_get_str(data, "stringValSub"),
      duration=_get_float(data, "duration"),
      animation_trigger_name=_get_str(data, "animationTriggerName"),
    )

@dataclasses.dataclass
class SoundData:
  play_mode : int = 0
  bgm : str = ''
  se : str = ''
  volume : float = 0.0
  se_bundle_name : str = ''
  duration : float = 0.0

  @staticmethod
  def from_json(data : dict) -> SoundData:
    return SoundData(
      play_mode=_get_int(data, "playMode"),
      bgm=_get_str(data, "bgm"),
      se=_get_str(data, "se"),
      volume=_get_float(data, "volume"),
      se_bundle_name=_get_str(data, "seBundleName"),
      duration=_get_float(data, "duration"),
    )

@dataclasses.dataclass
class StoryAsset:
  scenario_scene_id : str = ''
  story_type : int = 0
  appear_characters : list[AppearCharacter] = dataclasses.field(default_factory=list)
  first_bgm : str = ''
  first_background : str = ''
  first_background_bundle_name : str = ''
  snippets : list[Snippet] = dataclasses.field(default_factory=list)
  talk_data : list[TalkData] = dataclasses.field(default_factory=list)
  layout_data : list[LayoutData] = dataclasses.field(default_factory=list)
  special_effect_data : list[SpecialEffectData] = dataclasses.field(default_factory=list)
  sound_data : list[SoundData] = dataclasses.field(default_factory=list)
  include_sound_data_bundle_names : list[str] = dataclasses.field(default_factory=list)

  @staticmethod
  def from_json(data : dict) -> StoryAsset:
    # 接受 {"Base": {...}} 或者直接是里面的对象
    if isinstance(data.get("Base"), dict):
      data = data["Base"]
    # 不是对象的行按默认值处理，保持下标与 referenceIndex 对应
    def get_records(key : str, cls : typing.Any) -> list:
      return [cls.from_json(v if isinstance(v, dict) else {}) for v in _get_list(data, key)]
    return StoryAsset(
      scenario_scene_id=_get_str(data, "scenarioSceneId"),
      story_type=_get_int(data, "storyType"),
      appear_characters=get_records("appearCharacters", AppearCharacter),
      first_bgm=_get_str(data, "firstBgm"),
      first_background=_get_str(data, "firstBackground"),
      first_background_bundle_name=_get_str(data, "firstBackgroundBundleName"),
      snippets=get_records("snippets", Snippet),
      talk_data=get_records("talkData", TalkData),
      layout_data=get_records("layoutData", LayoutData),
      special_effect_data=get_records("specialEffectData", SpecialEffectData),
      sound_data=get_records("soundData", SoundData),
      include_sound_data_bundle_names=[s for s in _get_list(data, "includeSoundDataBundleNames") if isinstance(s, str)],
    )

def load_story_asset(path : str) -> StoryAsset:
  # 编码检测与文本前端相同
  with open(path, "rb") as f:
    data = f.read()
  det = chardet.detect(data, should_rename_legacy=True)
  strcontent = data.decode(encoding=det["encoding"] or "utf-8", errors="ignore")
  return StoryAsset.from_json(json.loads(strcontent))
