from sample_app.main import main

main()
