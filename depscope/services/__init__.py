"""服务层

- project_detector.py: 项目发现与包管理器识别
- update_checker.py:   注册表更新检查
- security_scanner.py: 安全审计
- license_checker.py:  许可证合规检查
- aggregator.py:       项目汇总统计
- container.py:        服务容器
"""
