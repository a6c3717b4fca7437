PROG = "strato"
DESC = "CLI for listing and inspecting deployments on the Strato platform"
