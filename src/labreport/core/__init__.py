"""核心：配置、异常、日志"""
