# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 所有转换过程中的提示信息都经由这里输出
# 转换器、后端都不抛出“内容上的”异常，而是在这里记录一条信息然后继续
# 需要把信息收集起来的调用者（比如测试、图形界面）可以继承 MessageHandler 并用 install_message_handler() 替换默认实例

import enum
import sys
import time
import threading

class MessageHandler:
  class MessageImportance(enum.Enum):
    Error = enum.auto()
    CriticalWarning = enum.auto() # 原先“应该不会发生”的情况，结果可能有问题
    Warning = enum.auto()
    Info = enum.auto()

    def get_short_name(self):
      match self:
        case MessageHandler.MessageImportance.Error:
          return "E"
        case MessageHandler.MessageImportance.CriticalWarning:
          return "C"
        case MessageHandler.MessageImportance.Warning:
          return "W"
        case MessageHandler.MessageImportance.Info:
          return "I"
        case _:
          return "?"

  _instance = None
  _starttime = time.time()
  _mutex = threading.Lock()

  # 默认使用 utf-8 编码，剧情文本基本都不是 ASCII
  if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding='utf-8')
  if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding='utf-8')

  @staticmethod
  def install_message_handler(handler):
    # 继承 MessageHandler 后调用该函数来替换输出方式
    # 传入 None 则恢复默认实例
    assert handler is None or isinstance(handler, MessageHandler)
    MessageHandler._instance = handler

  def message(self, importance : MessageImportance, msg : str, file : str = "", location: str = ""):
    # location 一般已经包含了文件路径，有的话优先使用
    locstring = location if len(location) > 0 else file
    if len(locstring) > 0:
      locstring += ': '
    with MessageHandler._mutex:
      curtime = time.time()
      print("[{time:.3f} {imp}] {loc}{msg}".format(time=(curtime - MessageHandler._starttime), imp=importance.get_short_name(), loc=locstring, msg=msg), flush=True)

  @staticmethod
  def get():
    if MessageHandler._instance is None:
      MessageHandler._instance = MessageHandler()
    return MessageHandler._instance

  @staticmethod
  def info(msg : str, file : str = "", location: str = ""):
    MessageHandler.get().message(MessageHandler.MessageImportance.Info, msg, file, location)

  @staticmethod
  def warning(msg : str, file : str = "", location: str = ""):
    MessageHandler.get().message(MessageHandler.MessageImportance.Warning, msg, file, location)

  @staticmethod
  def critical_warning(msg : str, file : str = "", location: str = ""):
    MessageHandler.get().message(MessageHandler.MessageImportance.CriticalWarning, msg, file, location)

  @staticmethod
  def error(msg : str, file : str = "", location: str = ""):
    MessageHandler.get().message(MessageHandler.MessageImportance.Error, msg, file, location)
