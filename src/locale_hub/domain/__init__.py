"""不依赖任何基础设施的纯领域逻辑。"""
