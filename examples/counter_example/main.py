import asyncio
import logging

from pystorelite import StoreProvider

from counter_actions import decrement, increment, load_count_request, sync
from counter_store import CounterStore


async def main():
    logging.basicConfig(level=logging.INFO)

    provider = StoreProvider(lambda: CounterStore().store)
    store = provider.provide()

    # 訂閱計數變化
    store.select(lambda state: state.count).subscribe(
        on_next=lambda count: print(f"計數: {count}")
    )

    print("\n==== 開始測試基本操作 ====")
    dispatch = provider.use_dispatch()
    dispatch(increment())
    dispatch(increment())
    dispatch(decrement())

    # 模擬外部輸入在每次渲染後同步進 Store
    outside_count = 100
    provider.rerender(lambda state: sync(outside_count) if state.count != outside_count else None)

    print("\n==== 開始測試異步操作 ====")
    dispatch(load_count_request())
    await store.join()

    print("\n==== 最終狀態 ====")
    print(store.get_model())


if __name__ == "__main__":
    asyncio.run(main())
