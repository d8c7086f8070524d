"""数据处理模块."""

"""
bulk_sheet_editor/data/
├── __init__.py
├── cell_reference.py      # A1单元格引用
├── csv_reader.py          # CSV读取与预览
├── models.py              # 数据模型定义
├── workbook/              # 工作簿读写
│   ├── __init__.py
│   ├── base_format.py
│   ├── ods_format.py
│   └── xlsx_format.py
├── placeholder_detector/  # 文本模板占位符检测器
│   ├── __init__.py
│   ├── base_detector.py
│   ├── docx_detector.py
│   └── odt_detector.py
├── document_io.py         # 文本文档读写
├── document_filler.py     # 占位符填充
└── report_generator.py    # 报告生成
"""
