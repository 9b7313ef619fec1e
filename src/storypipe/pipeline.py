# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import argparse
import dataclasses
import sys
import os
import time
import typing
import importlib
import importlib.util
import traceback

from .storyir import Story
from ._version import __version__
from .language import TranslationDomain, Translatable
from .exceptions import *
from . import irjson
from .storydump.export import convert_to_storydump

# 这里提供一个命令行界面，每个前端/后端都是一个“转换”，由命令行选项启用
# 前端读取外部文件（或者什么都不读）并生成剧情 IR (Story)，后端读取剧情 IR 并生成外部文件

# ------------------------------------------------------------------------------
# 接口
# ------------------------------------------------------------------------------

class TransformBase:
  @staticmethod
  def install_arguments(argument_group : argparse._ArgumentGroup):
    # 给命令行解析器（ArgumentParser）添加专属于该转换的参数
    # 只会在注册时提供了 arg_title 的情况下调用
    pass

  @staticmethod
  def handle_arguments(args : argparse.Namespace):
    # 当命令行解析完毕后，如果该转换被启用，则该函数负责读取该转换所使用的参数
    # 只会在注册时提供了 arg_title 的情况下调用
    pass

  _inputs : list[Story | str]
  _output : str

  def __init__(self) -> None:
    self._inputs = []
    self._output = ''

  def set_input(self, inputs: list[Story | str]) -> None:
    # 设置输入（不管是 IR 还是文件路径）
    # 即使是单个输入也是一个 list
    self._inputs = inputs

  def set_output_path(self, output : str):
    # 只有后端会被调用该函数，并且一定在 run() 之前
    self._output = output

  def run(self) -> Story | list[Story] | None:
    # 前端返回生成的 IR，后端不返回任何值，实现应该在 run() 返回前完成输出
    pass

  @property
  def inputs(self):
    return self._inputs

  @property
  def output(self):
    return self._output

  def __str__(self) -> str:
    result = type(self).__name__
    iostr = ''
    if len(self.inputs) > 0:
      input_list = []
      for v in self.inputs:
        if isinstance(v, str):
          input_list.append('"' + v + '"')
        elif isinstance(v, Story):
          input_list.append('[Story]"' + v.locale.value + '"')
      iostr += TR_pipeline_input.get() + "={" + ', '.join(input_list) + '}'
    if len(self.output) > 0:
      if len(iostr) > 0:
        iostr += ', '
      iostr += TR_pipeline_output.get() + '="' + self.output + '"'
    if len(iostr) > 0:
      result += '(' + iostr + ')'
    return result

# 定义一个转换时，需要(1)定义一个 TransformBase 的子类，(2)使用以下的一个修饰符来注册它
# flag 是命令行上用来启用该转换的选项（不带开头的 "--"）
# 读取外部文件并生成 Story 的是前端，用 @FrontendDecl 来注册
# 读取 Story 并生成外部内容的是后端，用 @BackendDecl 来注册
# IODecl 描述非 IR 的输入输出：
#   description 用于在命令行帮助文本中描述该输入
#   nargs 与 argparse 的 add_argument() 的 nargs 参数一致

@dataclasses.dataclass
class IODecl:
  description : str # 用于描述该输入输出的字符串
  match_suffix : str | tuple[str, ...] | None = None # 仅用于帮助文本，字符串不包含'.'
  nargs : int | str = '*'

  def __str__(self) -> str:
    result = ''
    if len(self.description) > 0:
      result = self.description
    match_suffix_str = ''
    if self.match_suffix is not None:
      if isinstance(self.match_suffix, tuple):
        match_suffix_str = ', '.join(self.match_suffix)
      else:
        if not isinstance(self.match_suffix, str):
          raise SPAssertionError
        match_suffix_str = self.match_suffix
    if len(match_suffix_str) > 0:
      if len(result) > 0:
        result += ' '
      result += '(' + match_suffix_str + ')'
    return result

def FrontendDecl(flag : str, input_decl : IODecl, output_decl : type = Story):
  def decorator_frontend_decl(cls):
    TransformRegistration.register_frontend_transform(cls, flag, input_decl, output_decl)
    return cls
  return decorator_frontend_decl

def BackendDecl(flag : str, input_decl : type, output_decl : IODecl):
  def decorator_backend_decl(cls):
    TransformRegistration.register_backend_transform(cls, flag, input_decl, output_decl)
    return cls
  return decorator_backend_decl

def TransformArgumentGroup(title : str, desc : str | None = None):
  # 如果某个已经用以上修饰符注册过的转换需要额外的命令行参数，那么再在上面加这个修饰符
  # 这个修饰符必须加在上述注册用修饰符之前，不然的话当该修饰符执行时，转换还是未注册状态
  def decorator_ag(cls):
    TransformRegistration.register_argument_group(cls, title, desc)
    return cls
  return decorator_ag

# ------------------------------------------------------------------------------
# 实现
# ------------------------------------------------------------------------------

TR_pipeline = TranslationDomain("pipeline")

TR_pipeline_input = TR_pipeline.tr("input",
  en="input",
  zh_cn="输入",
  zh_hk="輸入",
)
TR_pipeline_output = TR_pipeline.tr("output",
  en="output",
  zh_cn="输出",
  zh_hk="輸出",
)

# 我们想要记住命令行的顺序，所以用一个自定义的 Action
class _OrderedPassAction(argparse.Action):
  def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace, values: str | typing.Sequence[typing.Any] | None, option_string: str | None = None) -> None:
    if not 'ordered_passes' in namespace:
      setattr(namespace, 'ordered_passes', [])
    previous : list[typing.Any] = namespace.ordered_passes
    previous.append((self.dest, values))
    setattr(namespace, 'ordered_passes', previous)

class TransformRegistration:
  @dataclasses.dataclass
  class TransformInfo:
    definition : type[TransformBase]
    flag : str
    input_decl : type | IODecl
    output_decl : type | IODecl
    arg_title : str | None
    arg_desc : str | None

    def is_frontend(self) -> bool:
      return isinstance(self.input_decl, IODecl)

  _registration_record : typing.ClassVar[dict[type, TransformInfo]] = {}
  _flag_to_type_dict : typing.ClassVar[dict[str, type]] = {}
  _frontend_records : typing.ClassVar[dict[str, TransformInfo]] = {}
  _backend_records : typing.ClassVar[dict[str, TransformInfo]] = {}

  # 每次运行的流程都是以下过程或其中的一部分：
    # 1. 前端读取外部文件，或者直接读取 IR 文件。可以同时使用多个前端，所有前端的结果合在一起
    # 2. 后端读取所有的 IR，生成输出。可以同时使用多个后端
    # argparse 记录下来的顺序就是命令行的顺序，但是为了方便复现问题，前后端都按选项的字母顺序进行

  _tr_TransformRegistration_noinst = TR_pipeline.tr("transformregistration_noinst",
    en="TransformRegistration should not be instantiated. Please do not create the instance.",
    zh_cn="TransformRegistration 不应该被实例化，请勿创建其实例。",
    zh_hk="TransformRegistration 不應該被實例化，請勿創建其實例。",
  )

  def __init__(self) -> None:
    raise RuntimeError(self._tr_TransformRegistration_noinst)

  _tr_TransformRegistration_arg_before_reg = TR_pipeline.tr("transformregistration_arg_before_reg",
    en="Transform not registered yet when registering arguments (please double check if decorator @TransformArgumentGroup is added before @FrontendDecl/@BackendDecl).",
    zh_cn="转换步骤在添加参数时还未注册 （请检查是否已将修饰符 @TransformArgumentGroup 加在 @FrontendDecl/@BackendDecl 之前）。",
    zh_hk="轉換步驟在添加參數時還未註冊 （請檢查是否已將修飾符 @TransformArgumentGroup 加在 @FrontendDecl/@BackendDecl 之前）。",
  )

  @staticmethod
  def register_argument_group(transform_cls, arg_title : str, arg_desc : str | None):
    if not issubclass(transform_cls, TransformBase):
      raise SPAssertionError("Registering transform not inherting from TransformBase")
    if not isinstance(arg_title, str):
      raise SPAssertionError("Transform argument title must be a string")
    if arg_desc is not None:
      if not isinstance(arg_desc, str):
        raise SPAssertionError("Transform argument group description must be a string")
    if transform_cls not in TransformRegistration._registration_record:
      raise RuntimeError(TransformRegistration._tr_TransformRegistration_arg_before_reg)
    info = TransformRegistration._registration_record[transform_cls]
    info.arg_title = arg_title
    info.arg_desc = arg_desc

  @staticmethod
  def _iodecl_to_string(decl : type | IODecl):
    if isinstance(decl, IODecl):
      return str(decl)
    if not (isinstance(decl, type) and issubclass(decl, Story)):
      raise SPAssertionError("Invalid decl type; should be either IODecl instance or Story")
    return decl.__name__

  _tr_TransformRegistration_install_args_without_reg = TR_pipeline.tr("transformregistration_install_args_without_reg",
    en="Pass overriding install_arguments() without argument title (did you forgot using @TransformArgumentGroup(<arg_title>) decorator?)",
    zh_cn="转换步骤覆盖了 install_arguments() 但是没有参数组名 （你是否忘记使用 @TransformArgumentGroup(<参数组名>) 修饰符？）",
    zh_hk="轉換步驟覆蓋了 install_arguments() 但是沒有參數組名 （你是否忘記使用 @TransformArgumentGroup(<參數組名>) 修飾符？）",
  )

  @staticmethod
  def setup_argparser(parser : argparse.ArgumentParser):

    def get_transform_helpstr(info : TransformRegistration.TransformInfo):
      return info.definition.__name__ + ': ' + TransformRegistration._iodecl_to_string(info.input_decl) + ' -> ' + TransformRegistration._iodecl_to_string(info.output_decl)

    def add_frontend_transform_arg(group : argparse._ArgumentGroup, info : TransformRegistration.TransformInfo):
      group.add_argument('--' + info.flag, dest=info.flag, action=_OrderedPassAction, nargs = info.input_decl.nargs, help=get_transform_helpstr(info))

    def add_backend_transform_arg(group : argparse._ArgumentGroup, info : TransformRegistration.TransformInfo):
      group.add_argument('--' + info.flag, dest=info.flag, action=_OrderedPassAction, nargs = info.output_decl.nargs, help=get_transform_helpstr(info))

    def handle_stage_group(flags_dict : dict[str, TransformRegistration.TransformInfo], stage_name : str, stage_desc : str, cb_add_arg : typing.Callable):
      if not len(flags_dict) > 0:
        raise SPAssertionError("handling empty stage group?")
      group = parser.add_argument_group(title=stage_name, description=stage_desc)
      for flag, info in sorted(flags_dict.items()):
        cb_add_arg(group, info)
        if info.arg_title is not None:
          transform_arg_group = parser.add_argument_group(title=info.arg_title, description=info.arg_desc)
          info.definition.install_arguments(transform_arg_group)
        else:
          # 如果该类型覆盖了 install_arguments 但是没有 arg_title, 我们报错（提示用 @TransformArgumentGroup 修饰符）
          if info.definition.install_arguments is not TransformBase.install_arguments:
            raise RuntimeError(TransformRegistration._tr_TransformRegistration_install_args_without_reg)

    parser.add_argument('-v', '--verbose', dest='verbose', action='store_true', help='Show version and (if other commands specified) verbose debug information')
    if len(TransformRegistration._frontend_records) > 0:
      handle_stage_group(TransformRegistration._frontend_records, 'Front end', 'Options to enable frontend transforms', add_frontend_transform_arg)
    if len(TransformRegistration._backend_records) > 0:
      handle_stage_group(TransformRegistration._backend_records, 'Back end', 'Options to enable backend transforms', add_backend_transform_arg)

  _tr_pipeline_stage = TR_pipeline.tr("static_prompt",
    en="Pipeline stage {index} ({flag}): ",
    zh_cn="管线步骤 {index} ({flag}): ",
    zh_hk="管線步驟 {index} ({flag}): "
  )
  _tr_pipeline_multiple_output = TR_pipeline.tr("pipeline_multiple_output",
    en="Only zero or one output path is supported for each backend.",
    zh_cn="每个后端只支持零或一个输出路径。",
    zh_hk="每個後端只支持零或一個輸出路徑。",
  )

  @staticmethod
  def build_pipeline(parsed_args : argparse.Namespace) -> list[TransformBase]:
    # 找到所有被调用的转换，将它们的命令行参数解析好，然后组成最终的管线
    # 如果其中有什么问题，则我们抛出异常
    verbose = parsed_args.verbose
    ordered_passes : list[tuple[str, typing.Any]] = getattr(parsed_args, "ordered_passes", [])
    def get_sort_key(entry : tuple[str, typing.Any]):
      info = TransformRegistration._registration_record[TransformRegistration._flag_to_type_dict[entry[0]]]
      return (0 if info.is_frontend() else 1, entry[0])
    pipeline : list[TransformBase] = []
    initialized_tys : set[type] = set()
    pipeline_index = 0
    for flag, value in sorted(ordered_passes, key=get_sort_key):
      pipeline_index += 1
      transform_cls = TransformRegistration._flag_to_type_dict[flag]
      info = TransformRegistration._registration_record[transform_cls]
      # 让转换读取相应的命令行参数
      if info.arg_title is not None:
        if transform_cls not in initialized_tys:
          initialized_tys.add(transform_cls)
          transform_cls.handle_arguments(parsed_args)
      transform_inst : TransformBase = transform_cls()
      if isinstance(info.input_decl, IODecl):
        input_list = []
        if isinstance(value, list):
          input_list = value.copy()
        elif isinstance(value, str):
          input_list = [value]
        elif value is not None:
          raise SPInternalError("Unexpected value type " + str(type(value)))
        transform_inst.set_input(input_list)
      if isinstance(info.output_decl, IODecl):
        output_path = ''
        if isinstance(value, list):
          if not len(value) < 2:
            raise RuntimeError(TransformRegistration._tr_pipeline_stage.format(index=str(pipeline_index), flag=flag) + TransformRegistration._tr_pipeline_multiple_output.get())
          if len(value) != 0:
            output_path = value[0]
        elif isinstance(value, str):
          output_path = value
        transform_inst.set_output_path(output_path)
      pipeline.append(transform_inst)
      if verbose:
        print(TransformRegistration._tr_pipeline_stage.format(index=str(pipeline_index), flag=flag) + str(transform_inst))
    return pipeline

  _tr_transform_already_registered = TR_pipeline.tr("transform_already_registered",
    en="Transform class {classname} is registered more than once. Please check if annotated with more than one of @FrontendDecl/@BackendDecl.",
    zh_cn="转换步骤类 {classname} 被重复注册。请检查其是否被不止一个 @FrontendDecl/@BackendDecl 所标注。",
    zh_hk="轉換步驟類 {classname} 被重復註冊。請檢查其是否被不止一個 @FrontendDecl/@BackendDecl 所標註。"
  )
  _tr_transform_flag_already_used = TR_pipeline.tr("transform_flag_already_used",
    en="Pass flag {flag} already in use: registered class: {existing}, current class: {current}",
    zh_cn="步骤选项 {flag} 已被占用：已注册的类：{existing}, 当前正在注册的类：{current}",
    zh_hk="步驟選項 {flag} 已被占用：已註冊的類：{existing}, 當前正在註冊的類：{current}",
  )

  @staticmethod
  def register_transform_common(transform_cls, flag : str, input_decl : type | IODecl, output_decl : type | IODecl) -> TransformInfo:
    if not (isinstance(transform_cls, type) and issubclass(transform_cls, TransformBase)):
      raise SPAssertionError("Transform should be a subclass of TransformBase")
    if not (isinstance(flag, str) and not flag.startswith('-')):
      raise SPAssertionError("Transform flag must be a string without starting '-'")
    if transform_cls in TransformRegistration._registration_record:
      raise RuntimeError(TransformRegistration._tr_transform_already_registered.format(classname=str(transform_cls)))
    if flag in TransformRegistration._flag_to_type_dict:
      raise RuntimeError(TransformRegistration._tr_transform_flag_already_used.format(flag=flag, existing=str(TransformRegistration._flag_to_type_dict[flag]), current=str(transform_cls)))
    TransformRegistration._flag_to_type_dict[flag] = transform_cls
    info = TransformRegistration.TransformInfo(transform_cls, flag, input_decl, output_decl, None, None)
    TransformRegistration._registration_record[transform_cls] = info
    return info

  @staticmethod
  def register_frontend_transform(transform_cls, flag : str, input_decl : IODecl, output_decl : type):
    if not isinstance(input_decl, IODecl):
      raise SPAssertionError("Frontend must use IODecl for input declaration")
    if not (isinstance(output_decl, type) and issubclass(output_decl, Story)):
      raise SPAssertionError("Frontend must produce Story")
    info = TransformRegistration.register_transform_common(transform_cls, flag, input_decl, output_decl)
    TransformRegistration._frontend_records[flag] = info

  @staticmethod
  def register_backend_transform(transform_cls, flag : str, input_decl : type, output_decl : IODecl):
    if not (isinstance(input_decl, type) and issubclass(input_decl, Story)):
      raise SPAssertionError("Backend must take Story as input")
    if not isinstance(output_decl, IODecl):
      raise SPAssertionError("Backend must use IODecl for output declaration")
    info = TransformRegistration.register_transform_common(transform_cls, flag, input_decl, output_decl)
    TransformRegistration._backend_records[flag] = info

# ------------------------------------------------------------------------------
# 与具体格式无关的转换
# ------------------------------------------------------------------------------

def write_text_output(path : str, documents : typing.Iterable[str]):
  # 多个输入时，文本输出之间用空行分隔
  with open(path, "w", newline="\n", encoding="utf-8") as f:
    f.write("\n\n".join(documents))

@FrontendDecl('load', input_decl=IODecl(description='IR file', match_suffix='json', nargs='+'), output_decl=Story)
class _LoadIR(TransformBase):
  def run(self) -> list[Story]:
    results = []
    for path in self.inputs:
      loaded = irjson.load_story(path)
      if isinstance(loaded, list):
        results.extend(loaded)
      else:
        results.append(loaded)
    return results

@BackendDecl('save', input_decl=Story, output_decl=IODecl('IR file', nargs=1))
class _SaveIR(TransformBase):
  def run(self) -> None:
    if len(self.inputs) == 0:
      raise SPInternalError('No IR for export')
    if len(self.inputs) == 1:
      irjson.save_story(self.inputs[0], self.output)
    else:
      irjson.save_story(self.inputs, self.output)

@BackendDecl('dump', input_decl=Story, output_decl=IODecl('<No output>', nargs=0))
class _DumpIR(TransformBase):
  def run(self) -> None:
    for story in self.inputs:
      print(convert_to_storydump(story))

class _PipelineManager:
  _TR_pipeline_version = TR_pipeline.tr("storypipe_version",
    en="storypipe {version}",
    zh_cn="剧情转换器 {version}",
    zh_hk="劇情轉換器 {version}",
  )
  _TR_pipeline_running = TR_pipeline.tr("running",
    en="Running",
    zh_cn="正在执行",
    zh_hk="正在執行",
  )
  _TR_pipeline_finished = TR_pipeline.tr("finished",
    en="Finished",
    zh_cn="执行结束",
    zh_hk="執行結束",
  )
  _TR_pipeline_base_prompt = TR_pipeline.tr("runtime_prompt",
    en="At pipeline step {step_count} ({flag}): ",
    zh_cn="步骤 {step_count} ({flag}): ",
    zh_hk="步驟 {step_count} ({flag}): ",
  )
  _TR_pipeline_no_input = TR_pipeline.tr("no_input",
    en="No IR input available. This probably means no frontend produced any output. Please check if the source input is valid.",
    zh_cn="没有输入 IR。这一般是因为没有前端产生任何输出。请确认源文件是否存在、有效。",
    zh_hk="沒有輸入 IR。這一般是因為沒有前端產生任何輸出。請確認源文件是否存在、有效。",
  )
  _tr_pipeline_last_ir_notused = TR_pipeline.tr("pipeline_output_unused",
    en="Warning: the IR is not used and will be discarded. Please check if you missed any output transform flags.",
    zh_cn="警告：生成的 IR 未被使用，结果将被丢弃。请检查是否遗漏了输出步骤的选项。",
    zh_hk="警告：生成的 IR 未被使用，結果將被丟棄。請檢查是否遺漏了輸出步驟的選項。",
  )

  @staticmethod
  def pipeline_main(args : list[str] | None = None):
    # 先尝试读取插件
    _PipelineManager._load_plugins()
    # args 应该是不带 sys.argv[0] 的
    if args is None:
      args = sys.argv[1:]

    parser = argparse.ArgumentParser(prog='storypipe', description=Translatable.tr_program_name.get())
    Translatable._language_install_arguments(parser) # pylint: disable=protected-access
    TransformRegistration.setup_argparser(parser)
    result_args = parser.parse_args(args)
    Translatable._language_handle_arguments(result_args, result_args.verbose) # pylint: disable=protected-access

    # 如果没有执行任何操作，我们打印用法
    is_action_performed = False

    if result_args.verbose:
      print(_PipelineManager._TR_pipeline_version.format(version=__version__))
      is_action_performed = True

    pipeline = TransformRegistration.build_pipeline(result_args)
    current_stories : list[Story] = []
    step_count = 0
    is_current_ir_used = False
    starttime = time.time()
    def get_timestr():
      curtime = time.time()
      timestr = "{:.2f}".format(curtime - starttime)
      return timestr
    for t in pipeline:
      step_count += 1
      info = TransformRegistration._registration_record[type(t)]
      if result_args.verbose:
        print('[' + get_timestr() + '] ' + _PipelineManager._TR_pipeline_running.get() + ' ' + info.flag + " (" + str(step_count) + '/' + str(len(pipeline)) + ')')
      if info.is_frontend():
        run_result = t.run()
        if isinstance(run_result, list):
          list_result = run_result.copy()
        elif isinstance(run_result, Story):
          list_result = [run_result]
        elif run_result is None:
          list_result = []
        else:
          raise SPInternalError('Unexpected return type for TransformBase.run(): ' + type(run_result).__name__)
        current_stories.extend(list_result)
      else:
        if len(current_stories) == 0:
          raise RuntimeError(_PipelineManager._TR_pipeline_base_prompt.format(step_count=str(step_count), flag=info.flag) + _PipelineManager._TR_pipeline_no_input.get())
        t.set_input(current_stories.copy())
        is_current_ir_used = True
        t.run()

    if step_count > 0:
      is_action_performed = True

    if not is_action_performed:
      parser.print_usage()
      return

    if len(current_stories) > 0 and not is_current_ir_used:
      print(_PipelineManager._tr_pipeline_last_ir_notused.get())

    if result_args.verbose:
      print('[' + get_timestr() + '] ' + _PipelineManager._TR_pipeline_finished.get())

  _tr_plugin_loading = TR_pipeline.tr("plugin_loading",
    en="Loading plugin {modulename} from {filepath}",
    zh_cn="正在从 {filepath} 读取插件 {modulename}",
    zh_hk="正在從 {filepath} 讀取插件 {modulename}",
  )
  _tr_plugin_load_fail = TR_pipeline.tr("plugin_load_fail",
    en="Cannot load plugin {modulename} from {filepath}, skipped",
    zh_cn="无法从 {filepath} 读取插件 {modulename}, 跳过",
    zh_hk="無法從 {filepath} 讀取插件 {modulename}, 跳過",
  )

  @staticmethod
  def _load_module(module_name, file_path):
    print(_PipelineManager._tr_plugin_loading.format(modulename=module_name, filepath=file_path))
    is_loaded = False
    try:
      if spec := importlib.util.spec_from_file_location(module_name, file_path):
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        is_loaded = True
    except Exception as e: # pylint: disable=broad-exception-caught
      # 插件出错不影响主程序
      traceback.print_exception(e)
    if not is_loaded:
      print(_PipelineManager._tr_plugin_load_fail.format(modulename=module_name, filepath=file_path))

  _tr_plugin_load_start = TR_pipeline.tr("plugin_load_start",
    en="Loading plugin(s) from STORYPIPE_PLUGINS: ",
    zh_cn="即将从 STORYPIPE_PLUGINS 读取插件: ",
    zh_hk="即將從 STORYPIPE_PLUGINS 讀取插件: ",
  )

  @staticmethod
  def _load_plugins():
    if plugindir := os.environ.get("STORYPIPE_PLUGINS"):
      plugindir = os.path.realpath(plugindir)
      plugin_modulebase = "storypipe.plugin."
      if os.path.isdir(plugindir):
        dircontent = os.listdir(plugindir)
        if len(dircontent) > 0:
          print(_PipelineManager._tr_plugin_load_start.get() + '"' + plugindir + '"')
          for pluginname in sorted(dircontent):
            curpath = os.path.join(plugindir, pluginname)
            if os.path.isfile(curpath):
              # 检查是否是 Python 文件，是的话当作插件来导入
              basename, ext = os.path.splitext(pluginname)
              if ext.lower() == '.py':
                _PipelineManager._load_module(plugin_modulebase + basename, curpath)
            elif os.path.isdir(curpath):
              filepath = os.path.join(plugindir, pluginname, pluginname + ".py")
              if os.path.isfile(filepath):
                _PipelineManager._load_module(plugin_modulebase + pluginname, filepath)

def pipeline_main(args : list[str] | None = None):
  # 这个全局函数作为对外的接口
  # 以后类型拆分或是重命名都不会改变这个函数的名称和输入
  _PipelineManager.pipeline_main(args)

if __name__ == "__main__":
  # 这个文件只是被所有转换步骤所引用，自身并没有向外的引用，所以只执行该文件的话步骤不会被注册
  raise SPNotImplementedError('Please invoke pipeline_cmd instead')
