import asyncio

from counter_actions import load_count_request, load_count_success


async def load_initial_count(state):
    """模擬啟動時從 API 載入計數"""
    await asyncio.sleep(0.5)
    return load_count_success(10)


async def counter_effect(state, action):
    """收到載入請求時模擬 API 呼叫，成功後 dispatch load_count_success"""
    if load_count_request.match(action):
        await asyncio.sleep(1.0)
        return load_count_success(42)
    return None
