from companyinfo.main import main

main()
