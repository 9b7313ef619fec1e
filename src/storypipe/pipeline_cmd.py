# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
from .pipeline import pipeline_main

# 我们在这里要把所有注册了转换的模块全都引用进来，不然的话当该模块作为 __main__ 的时候，那些注册的代码不会被执行，转换也无法从命令行被调用

from .bandori import passes as bandori_passes
from .plaintext import passes as plaintext_passes
from .storydump import passes as storydump_passes
from .bestdori import passes as bestdori_passes
from . import testbench

def main():
  pipeline_main()

if __name__ == "__main__":
  main()
