"""
课程示例应用

- products/: 商品模块
- users/: 用户模块（与评论模块循环依赖，通过 forward_ref 打破）
- reviews/: 评论模块
- app_module.py: 根模块
- main.py: 应用入口
"""
