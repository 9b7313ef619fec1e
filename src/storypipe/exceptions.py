# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 如果异常是可以因为用户的误操作而出现的，则应该创建翻译域和译段来支持多语言输出
# 如果异常只是因为程序内部错误（比如后端拿到了生成器不应该生成的 IR），则可以使用这里定义的异常类型

from .language import TR_storypipe

class SPInternalError(RuntimeError):
  '''没有翻译的需求时，替代默认的 RuntimeError'''
  def __init__(self, msg : str = '') -> None:
    super().__init__(TR_storypipe.unreachable.get_with_msg(msg))

class SPNotImplementedError(NotImplementedError):
  '''没有翻译的需求时，替代默认的 NotImplementedError'''
  def __init__(self, msg : str = '') -> None:
    super().__init__(TR_storypipe.not_implemented.get_with_msg(msg))

class SPAssertionError(AssertionError):
  def __init__(self, msg : str = '') -> None:
    super().__init__(TR_storypipe.assert_failure.get_with_msg(msg))
