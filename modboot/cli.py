#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ModBoot CLI 工具

提供模块图查看、引导预演和启动应用功能
"""

import importlib
import json
import os
import re
import sys
from typing import Any, Optional

import click

from .core.di import Container, ModuleDescriptor
from .exceptions import ModBootException


def _load_object(target: str) -> Any:
    """
    从模块路径加载对象

    支持的格式:
        - "module.path:AppModule"        -> 获取 module.path 模块的 AppModule 属性
        - "module.path:create_app()"     -> 调用 module.path 模块的 create_app() 函数
        - "module.path"                  -> 默认取 AppModule 属性
    """
    if ":" in target:
        module_path, expr = target.rsplit(":", 1)
    else:
        module_path, expr = target, "AppModule"

    # 允许直接加载当前目录下的项目代码
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    result = importlib.import_module(module_path)

    # 按 . 分割，但不分割括号内的点
    for part in re.split(r'\.(?![^(]*\))', expr):
        part = part.strip()
        if not part:
            continue
        if part.endswith("()"):
            result = getattr(result, part[:-2])()
        else:
            result = getattr(result, part)
    return result


def _load_root_module(target: str) -> ModuleDescriptor:
    root = _load_object(target)
    if not isinstance(root, ModuleDescriptor):
        click.echo(f"❌ 错误: '{target}' 不是模块描述 (实际类型: {type(root).__name__})", err=True)
        sys.exit(2)
    return root


def _echo_graph(graph: dict) -> None:
    for name, node in graph.items():
        flag = " [global]" if node['global'] else ""
        click.echo(f"📦 {name}{flag}")
        if node['imports']:
            click.echo(f"   imports: {', '.join(node['imports'])}")
        if node['exports']:
            click.echo(f"   exports: {', '.join(node['exports'])}")
        for provider in node['providers']:
            deps = f" <- {', '.join(provider['deps'])}" if provider['deps'] else ""
            click.echo(f"   • {provider['token']}{deps}  ({provider['state']})")
        for controller in node['controllers']:
            deps = f" <- {', '.join(controller['deps'])}" if controller['deps'] else ""
            click.echo(f"   ▸ {controller['name']} '{controller['base_path'] or '/'}'{deps}")


@click.group()
def cli():
    """ModBoot 命令行工具 - 模块化依赖注入框架"""
    pass


@cli.command()
@click.argument('target')
@click.option('--json', 'as_json', is_flag=True, help='以 JSON 格式输出')
def graph(target: str, as_json: bool):
    """显示模块图（TARGET 格式: module.path:AppModule）"""
    container = Container()
    try:
        container.register_module_tree(_load_root_module(target))
    except ModBootException as e:
        click.echo(f"❌ 模块注册失败: {e}", err=True)
        sys.exit(1)

    description = container.describe()
    if as_json:
        click.echo(json.dumps(description, ensure_ascii=False, indent=2))
    else:
        _echo_graph(description)


@cli.command()
@click.argument('target')
def check(target: str):
    """引导预演：构造全部提供者并报告模块图缺陷"""
    container = Container()
    try:
        container.register_module_tree(_load_root_module(target))
        container.bootstrap()
    except ModBootException as e:
        click.echo(f"❌ 引导失败 [{e.code}]: {e.message}", err=True)
        sys.exit(1)
    finally:
        container.close()

    click.echo(f"✅ 模块图检查通过: {len(container.registry.modules)} 个模块")


@cli.command()
@click.argument('target')
@click.option('--config', 'config_file', default=None, help='配置文件路径')
@click.option('--host', default=None, help='主机地址（默认读取 server.host）')
@click.option('--port', type=int, default=None, help='端口号（默认读取 server.port）')
def run(target: str, config_file: Optional[str], host: Optional[str], port: Optional[int]):
    """启动应用（TARGET 可以是根模块或 Application 实例）"""
    from .core.application import Application, create_app

    obj = _load_object(target)
    if isinstance(obj, ModuleDescriptor):
        obj = create_app(obj, config_file=config_file)
    elif not isinstance(obj, Application):
        click.echo(f"❌ 错误: '{target}' 既不是模块描述也不是应用实例", err=True)
        sys.exit(2)

    obj.run(host=host, port=port)


@cli.command()
def info():
    """显示 ModBoot 信息"""
    click.echo("🎯 ModBoot - 模块化依赖注入 Web 框架")
    click.echo()
    click.echo("✨ 主要特性:")
    click.echo("  • (模块, 令牌) 作用域单例")
    click.echo("  • 模块导入与导出可见性")
    click.echo("  • forward_ref 打破循环依赖")
    click.echo("  • 基于 FastAPI 的控制器路由")
    click.echo("  • Dynaconf 配置与 loguru 日志")
    click.echo()
    click.echo("🚀 快速开始:")
    click.echo("  modboot graph app.app_module:AppModule   # 查看模块图")
    click.echo("  modboot check app.app_module:AppModule   # 引导预演")
    click.echo("  modboot run app.app_module:AppModule     # 启动应用")
    click.echo()


if __name__ == '__main__':
    cli()
