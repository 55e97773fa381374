from install_assistant.cli.main import main

if __name__ == "__main__":
    main()
