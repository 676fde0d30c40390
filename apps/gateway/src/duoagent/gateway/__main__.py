"""python -m duoagent.gateway -- 加载 .env 后以 uvicorn 启动服务"""

import uvicorn
from dotenv import load_dotenv
from duoagent.core.config import get_server_host, get_server_port


def main() -> None:
    # 已存在的环境变量优先；app 以字符串形式导入，保证模块级配置读到 .env
    load_dotenv(override=False)
    uvicorn.run(
        "duoagent.gateway.main:app",
        host=get_server_host(),
        port=get_server_port(),
    )


if __name__ == "__main__":
    main()
