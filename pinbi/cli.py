"""
pinbi 命令行工具
"""

import argparse
import sys


def _run_query(query):
    """创建引擎并执行查询；词典加载失败时打印原因并以状态码 1 退出"""
    from pinbi import create_engine, DataLoadError
    try:
        return query(create_engine())
    except DataLoadError as e:
        print(f"词典加载失败: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv=None):
    """命令行入口"""
    parser = argparse.ArgumentParser(
        prog="pinbi",
        description="pinbi - 拼音编辑辅助引擎",
    )

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    # server 命令
    server_parser = subparsers.add_parser("server", help="启动 API 服务")
    server_parser.add_argument("--host", default="0.0.0.0", help="绑定地址 (默认: 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=3000, help="端口 (默认: 3000)")

    # search 命令
    search_parser = subparsers.add_parser("search", help="词典搜索（汉字 / 释义 / 拼音）")
    search_parser.add_argument("query", help="查询内容")
    search_parser.add_argument("-k", "--top-k", type=int, default=10, help="显示数量")

    # hanzi 命令
    hanzi_parser = subparsers.add_parser("hanzi", help="拼音转汉字候选")
    hanzi_parser.add_argument("pinyin", help="拼音或首字母简拼")
    hanzi_parser.add_argument("-k", "--top-k", type=int, default=10, help="显示数量")

    # tone 命令
    tone_parser = subparsers.add_parser("tone", help="给音节标调")
    tone_parser.add_argument("text", help="音节，如 hao")
    tone_parser.add_argument("tone", type=int, help="声调 1-4")

    # version 命令
    subparsers.add_parser("version", help="显示版本")

    args = parser.parse_args(argv)

    if args.command == "server":
        from pinbi.api.server import main as server_main
        import os
        os.environ["HOST"] = args.host
        os.environ["PORT"] = str(args.port)
        server_main()

    elif args.command == "search":
        results = _run_query(lambda engine: engine.search_dictionary(args.query))
        if not results:
            print("未找到结果")
        for i, entry in enumerate(results[:args.top_k], 1):
            print(f"{i}. {entry.word} [{entry.romanization}] {'; '.join(entry.meanings)}")
            if entry.example:
                print(f"   {entry.example}")

    elif args.command == "hanzi":
        results = _run_query(lambda engine: engine.search_candidates(args.pinyin))
        if not results:
            print("未找到候选")
        for i, c in enumerate(results[:args.top_k], 1):
            print(f"{i}. {c.entry.word} ({c.entry.romanization}) [{c.match_type.value}]")

    elif args.command == "tone":
        from pinbi import apply_tone
        print(apply_tone(args.text, args.tone))

    elif args.command == "version":
        from pinbi import __version__
        print(f"pinbi v{__version__}")

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
