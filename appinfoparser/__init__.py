from appinfoparser.common.parser import PackageInfo, parse_package  # noqa: F401
