"""Echo 模式端到端测试 -- 非流式与流式结果一致"""

import asyncio

from duoagent.provider import EchoMessageAdapter


def _body(text: str, stream: bool) -> dict:
    return {"message": {"parts": [{"type": "text", "text": text}]}, "stream": stream}


class TestEchoMode:
    async def test_batch_and_stream_agree(self, make_client):
        app, client = await make_client(EchoMessageAdapter())
        service = app.state.task_service

        batch_id = (await client.post("/api/message", json=_body("你好 世界", False))).json()[
            "task_id"
        ]
        stream_id = (await client.post("/api/message", json=_body("你好 世界", True))).json()[
            "task_id"
        ]
        await asyncio.gather(service.wait_for(batch_id), service.wait_for(stream_id))

        batch = await service.get_task(batch_id)
        stream = await service.get_task(stream_id)
        streamed_text = "".join(a.parts[0].text for a in stream.artifacts if a.parts)

        assert batch.artifacts[0].parts[0].text == "Echo: 你好 世界"
        assert streamed_text == "Echo: 你好 世界"

    async def test_list_tasks_after_processing(self, make_client):
        app, client = await make_client(EchoMessageAdapter())
        service = app.state.task_service

        task_id = (await client.post("/api/message", json=_body("hi", False))).json()["task_id"]
        await service.wait_for(task_id)

        resp = await client.get("/api/tasks", params={"state": "completed"})
        assert [t["task_id"] for t in resp.json()["tasks"]] == [task_id]
