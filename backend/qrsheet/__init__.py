"""
QR 标签表生成 - 核心模块

将表格记录按工作表分页，渲染为带标签的二维码页面，
导出为PNG或合成为多页打印文档。

模块结构：
- config/     运行期配置与日志
- models/     数据模型定义
- layout/     目录名清洗/分页/网格几何
- render/     页面文档组装与光栅化
- pipeline/   导出与打印编排
- adapters/   表格读取/二维码/目录选择/持久化/打印表面
"""

__version__ = "0.1.0"
