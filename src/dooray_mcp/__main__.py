from dooray_mcp.server import run

run()
