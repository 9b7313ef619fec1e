# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 该文件实现在代码中内嵌多语言的翻译（只用于程序自身的提示信息，剧情内容不做翻译）
# 我们想要如下功能：
# 1. 能够轻松在源代码中找到字符串使用的位置，不管是什么语言（所以翻译要内嵌）
# 2. 程序能够在内部找到某字段的当前所有翻译
#
# 数据结构基本模仿 GNU 翻译：
# 1. 每个模块都有一个翻译域，用来避免命名污染
# 2. 每段要翻译的内容都有一个独特的“译段”(Translatable)定义，包含原文和所有翻译内容

from __future__ import annotations
import argparse
import typing
import os
import locale
import traceback

class TranslationDomain:
  ALL_DOMAINS : typing.ClassVar[dict[str, TranslationDomain]] = {}
  SUPPORTED_LANGNAMES : typing.ClassVar[tuple[str,...]] = ("en", "zh_cn", "zh_hk")
  name : str
  elements : dict[str, Translatable]

  def __init__(self, name : str) -> None:
    assert isinstance(name, str) and len(name) > 0
    if name in self.ALL_DOMAINS:
      raise RuntimeError("TranslationDomain name clash:" + name)
    self.ALL_DOMAINS[name] = self
    self.name = name
    self.elements = {}

  def tr(self, code : str,
    en : str | list[str] | tuple[str], # 英语
    zh_cn : str | list[str] | tuple[str] | None = None, # 简中
    zh_hk : str | list[str] | tuple[str] | None = None, # 繁中
  ) -> Translatable:
    assert code not in self.elements
    candidates : dict[str, list[str]] = {}
    def add_lang(langcode : str, content : str | list[str] | tuple[str] | None):
      if content is None:
        return
      assert langcode not in candidates
      if isinstance(content, (list, tuple)):
        for s in content:
          assert isinstance(s, str)
        candidates[langcode] = list(content)
      elif isinstance(content, str):
        candidates[langcode] = [content]
      else:
        raise RuntimeError("Unexpected language expr format")
    add_lang("en",    en)
    add_lang("zh_cn", zh_cn)
    add_lang("zh_hk", zh_hk)
    result = Translatable(candidates=candidates, parent=self, code=code)
    self.elements[code] = result
    return result

  def get(self, code : str) -> Translatable:
    return self.elements[code]

  # 由于部分错误是任何地方都有可能碰到的，我们把一些常见的范式给放在这
  @property
  def assert_failure(self) -> Translatable:
    return TR_storypipe.get("unreachable_exception")

  @property
  def unreachable(self) -> Translatable:
    return TR_storypipe.get("unreachable_exception")

  @property
  def not_implemented(self) -> Translatable:
    return TR_storypipe.get("not_implemented")

# 只用作基础代码的翻译内容
TR_storypipe = TranslationDomain("storypipe")

class Translatable:
  candidates : dict[str, list[str]]
  parent : TranslationDomain
  code : str

  # 这些是临时数据
  cached_str : str | None
  cached_ver : int # 最后一次更新 cached_str 时 PREFERRED_LANG_VER 的值

  # 以下是程序初始化时设定的
  PREFERRED_LANG : typing.ClassVar[list[str]] = []
  PREFERRED_LANG_VER : typing.ClassVar[int] = 0 # 每次修改 PREFERRED_LANG 时加1

  def __init__(self, candidates : dict[str, list[str]], parent : TranslationDomain, code : str) -> None:
    self.candidates = candidates
    self.parent = parent
    self.code = code
    self.cached_str = None
    self.cached_ver = 0

  def get(self) -> str:
    if self.cached_str is not None and self.cached_ver == self.PREFERRED_LANG_VER:
      return self.cached_str
    self.flush_cache()
    for lang in self.PREFERRED_LANG:
      if lang in self.candidates:
        l = self.candidates[lang]
        if len(l) > 0:
          self.cached_str = l[0]
          return self.cached_str
    assert "en" in self.candidates
    self.cached_str = self.candidates["en"][0]
    return self.cached_str

  def get_with_msg(self, msg : str):
    # 一般用于在报错时追加部分没有翻译的错误提示
    # （只有程序内部错误的处理可以用这种方式，如果用户操作有错的话还是应该用带翻译的提示）
    result = self.get()
    if len(msg) > 0:
      result += '\n' + msg
    return result

  def flush_cache(self):
    self.cached_str = None
    self.cached_ver = self.PREFERRED_LANG_VER

  def __str__(self) -> str:
    return self.get()

  def format(self, *args : typing.Any, **kwargs : typing.Any):
    return self.get().format(*args, **kwargs)

  @staticmethod
  def _sanitize_for_print(s : str | typing.Any) -> str:
    if not isinstance(s, str):
      s = str(s)
    return s.encode("ascii", "replace").decode("ascii")

  @staticmethod
  def language_update_preferred_langs(language_list : list[str]):
    supported_langs : dict[str, list[str]] = {
      "en" : [],
      "zh" : ["cn", "hk"],
    }
    supported_lang_alias_dict : dict[str, str | tuple[str, str]] = {
      "english" : "en",
      "chinese (simplified)"  : ("zh", "cn"),
      "chinese (traditional)" : ("zh", "hk"),
    }
    Translatable.PREFERRED_LANG.clear()
    Translatable.PREFERRED_LANG_VER += 1
    for l in language_list:
      if len(l) == 0:
        continue
      # 尝试把语言和地区标识分开
      parts = l.lower().split('_')
      lang = parts[0]
      region = ''
      if len(parts) > 1:
        region = parts[1]
      if lang not in supported_langs:
        if lang in supported_lang_alias_dict:
          alias = supported_lang_alias_dict[lang]
          if isinstance(alias, str):
            lang = alias
          else:
            lang, region = alias
        else:
          # 无法识别的语言
          print("Unsupported language: " + Translatable._sanitize_for_print(lang))
          continue
      region_list = supported_langs[lang]
      if len(region_list) == 0:
        region = ''
      elif region not in region_list:
        region = region_list[0]
      final_lang_str = lang
      if len(region) > 0:
        final_lang_str = lang + '_' + region
      Translatable.PREFERRED_LANG.append(final_lang_str)

  @staticmethod
  def _init():
    language_list : list[str] | None = None
    # 首先从 STORYPIPE_LANGUAGE 环境变量中读取
    if lang := os.environ.get("STORYPIPE_LANGUAGE"):
      language_list = lang.split(',')
    elif t := locale.getlocale():
      # t 应该是类似 ('en_US', 'UTF-8') 或者 ('English_Canada', '936') 这样的东西，我们只要前一个值
      # (None, None) 也出现过
      try:
        lang = t[0]
        if isinstance(lang, str):
          language_list = [lang]
      except (TypeError, IndexError):
        traceback.print_exc()
    if language_list:
      Translatable.language_update_preferred_langs(language_list)

  @staticmethod
  def _language_install_arguments(parser : argparse.ArgumentParser):
    parser.add_argument("--language", nargs=1, type=str, help="Preferred language(s) for messages, separated by comma (e.g. en,zh_cn)")

  @staticmethod
  def _language_handle_arguments(args : argparse.Namespace, verbose : bool):
    if langs := getattr(args, "language", None):
      if isinstance(langs, list):
        langs = langs[0]
      Translatable.language_update_preferred_langs(langs.split(','))
    if verbose:
      print(Translatable._tr_lang_list.format(lang=str(Translatable.PREFERRED_LANG)))

  # 声明要在 Translatable 内，方便隐藏名称、避免名称冲突
  _tr_lang_list : typing.ClassVar[Translatable] = None # type: ignore

  tr_program_name : typing.ClassVar[Translatable] = None # type: ignore

# 初始化要在外面，不然 tr() 执行的时候，Translatable 类还没有闭合，无法创建实例
Translatable._tr_lang_list = TR_storypipe.tr("lang_list", # pylint: disable=protected-access
  en="Preferred language(s): {lang}",
  zh_cn="使用语言： {lang}",
  zh_hk="使用語言： {lang}",
)
Translatable.tr_program_name = TR_storypipe.tr("program_name",
  en="StoryPipe Story Converter",
  zh_cn="剧情转换器",
  zh_hk="劇情轉換器",
)

Translatable._init() # pylint: disable=protected-access

TR_storypipe.tr("unreachable_exception",
  en="An unexpected error happens and the program cannot continue. Please contact the developer to fix this.",
  zh_cn="程序遇到了程序员意料之外的情况，无法继续执行。请联系开发者来解决这个问题。",
  zh_hk="程序遇到了程序員意料之外的情況，無法繼續執行。請聯系開發者來解決這個問題。",
)
TR_storypipe.tr("not_implemented",
  en="The requested feature is not implemented and the program cannot continue. Please contact the developer to fix this.",
  zh_cn="所需的功能还没有完成，程序无法继续执行。请联系开发者来解决这个问题。",
  zh_hk="所需的功能還沒有完成，程序無法繼續執行。請聯系開發者來解決這個問題。",
)
