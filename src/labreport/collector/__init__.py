"""事件采集：汇总器、pytest 插件、results.json 回放"""
